"""Service layer public API.

Re-exports
----------
- :class:`BaseService` and :class:`RequestIdentity` (shared primitives).
- Session lifecycle: :class:`MerchantSessionService`, :class:`StaffSessionService`.
- Tenant-scoped services: :class:`MerchantService`, :class:`UserService`,
  :class:`AccessService`.
"""

from __future__ import annotations

from merchant_auth.services._shared.base import BaseService
from merchant_auth.services._shared.context import RequestIdentity
from merchant_auth.services.access.service import AccessService
from merchant_auth.services.auth.service import (
    MerchantSessionService,
    SessionService,
    StaffSessionService,
)
from merchant_auth.services.merchants.service import MerchantService
from merchant_auth.services.users.service import UserService

__all__ = [
    "AccessService",
    "BaseService",
    "MerchantService",
    "MerchantSessionService",
    "RequestIdentity",
    "SessionService",
    "StaffSessionService",
    "UserService",
]
