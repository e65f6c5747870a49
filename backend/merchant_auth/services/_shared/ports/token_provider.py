from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Final, Protocol

ACCESS: Final[str] = "access"
REFRESH: Final[str] = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified content of a session token.

    :ivar subject: Merchant id or staff user id the token was issued to.
    :ivar token_type: ``"access"`` or ``"refresh"``.
    :ivar principal_type: ``"merchant"`` or ``"user"``.
    :ivar issued_at: ``iat`` claim (UTC).
    :ivar expires_at: ``exp`` claim (UTC).
    :ivar jti: Random token identifier.
    :ivar extra: Any additional claims (e.g. ``merchant_id``/``role`` for staff).
    """

    subject: str
    token_type: str
    principal_type: str
    issued_at: datetime
    expires_at: datetime
    jti: str
    extra: dict[str, Any] = field(default_factory=dict)


class TokenIssuer(Protocol):
    """Port for issuing and validating signed session tokens."""

    refresh_ttl: timedelta

    def issue_access(
        self,
        subject_id: str,
        *,
        principal_type: str,
        extra_claims: dict[str, Any] | None = None,
    ) -> str: ...

    def issue_refresh(
        self,
        subject_id: str,
        *,
        principal_type: str,
        extra_claims: dict[str, Any] | None = None,
    ) -> str: ...

    def validate(self, token: str, *, expected_type: str | None = None) -> TokenClaims: ...
