"""Call-scoped identity value shared by the API gate and the services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RequestIdentity:
    """
    Identity attached to an inbound call by the context gate.

    :param merchant_id: Tenant of the caller; always present.
    :param user_id: Staff user id when the caller is a staff member.
    :param email: Optional staff email forwarded by the gateway.
    :param role: Optional role label forwarded by the gateway. Informational only.
    """

    merchant_id: str
    user_id: str | None = None
    email: str | None = None
    role: str | None = None

    @property
    def is_owner(self) -> bool:
        """Return ``True`` when the call is made by the merchant account itself."""
        return self.user_id is None
