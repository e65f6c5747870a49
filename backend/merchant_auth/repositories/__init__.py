"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from merchant_auth.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    paginate_select,
)
from merchant_auth.repositories.merchant import MerchantRepository
from merchant_auth.repositories.refresh_token import RefreshTokenRepository
from merchant_auth.repositories.role import PermissionRepository, RoleRepository
from merchant_auth.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "MerchantRepository",
    "Page",
    "Pagination",
    "PermissionRepository",
    "RefreshTokenRepository",
    "RoleRepository",
    "UserRepository",
    "paginate_select",
]
