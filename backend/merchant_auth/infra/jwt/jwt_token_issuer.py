# comments in English; reST docstrings
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Final
from uuid import uuid4

import jwt

from merchant_auth.services._shared.errors import ExpiredToken, InvalidToken
from merchant_auth.services._shared.ports import ACCESS, REFRESH, TokenClaims, TokenIssuer

log = logging.getLogger(__name__)

#: Only the HMAC-SHA2 family is accepted; asymmetric and "none" are refused.
SUPPORTED_ALGORITHMS: Final[frozenset[str]] = frozenset({"HS256", "HS384", "HS512"})

_RESERVED: Final[frozenset[str]] = frozenset(
    {"sub", "iat", "nbf", "exp", "jti", "type", "pt", "iss"}
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class JWTTokenIssuer(TokenIssuer):
    """
    PyJWT-backed implementation of :class:`TokenIssuer`.

    The signing key and lifetimes are injected at construction; nothing is
    read from application config at call time, so several issuers with
    different keys may coexist.

    :param secret_key: Symmetric HMAC key.
    :param access_ttl: Lifetime of access tokens.
    :param refresh_ttl: Lifetime of refresh tokens.
    :param algorithm: One of :data:`SUPPORTED_ALGORITHMS`.
    :param issuer: Optional ``iss`` stamped on every token and required on validation.
    :param leeway: Clock skew tolerated on ``exp``/``nbf`` checks, in seconds.
    :param clock: Source of the issuance instant.
    """

    secret_key: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    algorithm: str = "HS256"
    issuer: str | None = None
    leeway: int = 0
    clock: Callable[[], datetime] = field(default=_utcnow)

    def __post_init__(self) -> None:
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported JWT algorithm: {self.algorithm!r}")
        if not self.secret_key:
            raise ValueError("JWT secret key must not be empty")
        if self.access_ttl <= timedelta(0) or self.refresh_ttl <= timedelta(0):
            raise ValueError("Token lifetimes must be positive")

    # -------------------- helpers --------------------

    def _encode(
        self,
        subject_id: str,
        *,
        token_type: str,
        principal_type: str,
        ttl: timedelta,
        extra_claims: dict[str, Any] | None,
    ) -> str:
        now = self.clock()
        iat = int(now.timestamp())
        payload: dict[str, Any] = dict(extra_claims or {})
        payload.update(
            {
                "sub": str(subject_id),
                "iat": iat,
                "nbf": iat,
                "exp": iat + int(ttl.total_seconds()),
                "jti": uuid4().hex,
                "type": token_type,
                "pt": principal_type,
            }
        )
        if self.issuer:
            payload["iss"] = self.issuer
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    # -------------------- API ------------------------

    def issue_access(
        self,
        subject_id: str,
        *,
        principal_type: str,
        extra_claims: dict[str, Any] | None = None,
    ) -> str:
        return self._encode(
            subject_id,
            token_type=ACCESS,
            principal_type=principal_type,
            ttl=self.access_ttl,
            extra_claims=extra_claims,
        )

    def issue_refresh(
        self,
        subject_id: str,
        *,
        principal_type: str,
        extra_claims: dict[str, Any] | None = None,
    ) -> str:
        return self._encode(
            subject_id,
            token_type=REFRESH,
            principal_type=principal_type,
            ttl=self.refresh_ttl,
            extra_claims=extra_claims,
        )

    def validate(self, token: str, *, expected_type: str | None = None) -> TokenClaims:
        """
        Verify signature, algorithm and validity window, then return the claims.

        :param token: Encoded JWT.
        :param expected_type: ``"access"`` or ``"refresh"``; ``None`` accepts both.
        :raises ExpiredToken: When the signature is valid but ``exp`` has passed.
        :raises InvalidToken: On any other failure (signature, format, algorithm,
            missing claims, not-yet-valid, wrong type).
        """
        required = ["sub", "iat", "nbf", "exp", "jti"]
        if self.issuer:
            required.append("iss")
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                leeway=self.leeway,
                options={"require": required},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredToken() from exc
        except jwt.InvalidTokenError as exc:
            log.debug("Token rejected: %s", exc.__class__.__name__)
            raise InvalidToken() from exc

        token_type = payload.get("type")
        principal_type = payload.get("pt")
        if token_type not in (ACCESS, REFRESH) or not isinstance(principal_type, str):
            raise InvalidToken()
        if expected_type is not None and token_type != expected_type:
            raise InvalidToken(f"Expected a {expected_type} token")

        return TokenClaims(
            subject=str(payload["sub"]),
            token_type=token_type,
            principal_type=principal_type,
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
            jti=str(payload["jti"]),
            extra={k: v for k, v in payload.items() if k not in _RESERVED},
        )
