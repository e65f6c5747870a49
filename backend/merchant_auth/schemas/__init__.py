"""Marshmallow schemas for request validation and response serialization."""

from __future__ import annotations

from .access import PermissionSchema, RoleCreateSchema, RoleSchema
from .auth import (
    MerchantLoginResponseSchema,
    MerchantLoginSchema,
    RefreshTokenSchema,
    StaffLoginResponseSchema,
    StaffLoginSchema,
    TokenPairSchema,
)
from .common import PaginationQuerySchema, build_meta
from .merchant import MerchantSchema
from .user import (
    StaffSummarySchema,
    StaffUserSchema,
    UserCreateSchema,
    UserListQuerySchema,
    UserUpdateSchema,
)

__all__ = [
    "MerchantLoginResponseSchema",
    "MerchantLoginSchema",
    "MerchantSchema",
    "PaginationQuerySchema",
    "PermissionSchema",
    "RefreshTokenSchema",
    "RoleCreateSchema",
    "RoleSchema",
    "StaffLoginResponseSchema",
    "StaffLoginSchema",
    "StaffSummarySchema",
    "StaffUserSchema",
    "TokenPairSchema",
    "UserCreateSchema",
    "UserListQuerySchema",
    "UserUpdateSchema",
    "build_meta",
]
