from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class MerchantOut:
    """
    Merchant profile as seen by the merchant itself.

    :param id: Merchant id.
    :param name: Business name.
    :param phone: Login phone number.
    :param timezone: IANA zone name.
    :param user_management_enabled: Whether staff accounts may sign in.
    :param created_at: Account creation instant.
    """

    id: str
    name: str
    phone: str
    timezone: str
    user_management_enabled: bool
    created_at: datetime


@dataclass(frozen=True, slots=True)
class MerchantCreateIn:
    """Operator input for provisioning a merchant account."""

    name: str
    phone: str
    pin: str
    timezone: str = "UTC"
    user_management: bool = False
