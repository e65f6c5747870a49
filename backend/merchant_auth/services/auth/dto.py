# merchant_auth/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass, field

from merchant_auth.services.users.dto import StaffSummaryOut, StaffUserOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class MerchantLoginIn:
    """
    Input DTO for merchant login.

    :param phone: Merchant login phone number.
    :type phone: str
    :param pin: Raw PIN (to be verified).
    :type pin: str
    """

    phone: str
    pin: str


@dataclass(frozen=True, slots=True)
class StaffLoginIn:
    """
    Input DTO for staff login.

    :param merchant_id: Merchant the staff member belongs to.
    :type merchant_id: str
    :param login: Username or email, resolved within the merchant.
    :type login: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    merchant_id: str
    login: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for single-device logout.

    :param refresh_token: Encoded refresh JWT to revoke.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    :param token_type: Authorization scheme for the access token.
    :type token_type: str
    """

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class MerchantLoginOut:
    """
    Result of a merchant login.

    :param tokens: Fresh token pair.
    :param user_management_enabled: Whether staff accounts may sign in.
    :param staff: Active staff of the merchant (empty when the feature is off).
    """

    tokens: TokenPairOut
    user_management_enabled: bool
    staff: tuple[StaffSummaryOut, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class StaffLoginOut:
    """Result of a staff login: the token pair and the signed-in user."""

    tokens: TokenPairOut
    user: StaffUserOut
