from merchant_auth.models.merchant import FEATURE_USER_MANAGEMENT, Merchant
from merchant_auth.models.refresh_token import RefreshToken
from merchant_auth.models.role import Permission, Role, role_permissions
from merchant_auth.models.user import STATUS_ACTIVE, STATUS_INACTIVE, USER_STATUSES, User

__all__ = [
    "FEATURE_USER_MANAGEMENT",
    "Merchant",
    "Permission",
    "RefreshToken",
    "Role",
    "STATUS_ACTIVE",
    "STATUS_INACTIVE",
    "USER_STATUSES",
    "User",
    "role_permissions",
]
