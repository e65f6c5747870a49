"""Construction of the authentication components from application config."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from flask import Flask, current_app

from merchant_auth.core.config import INSECURE_JWT_SECRET
from merchant_auth.infra.jwt.jwt_token_issuer import JWTTokenIssuer
from merchant_auth.infra.security.credentials import WerkzeugCredentialHasher
from merchant_auth.services._shared.ports import (
    CredentialHasher,
    PrincipalType,
    RefreshTokenStore,
    TokenIssuer,
)
from merchant_auth.services.auth.service import (
    MerchantSessionService,
    SessionService,
    StaffSessionService,
)

log = logging.getLogger(__name__)

EXTENSION_KEY = "merchant_auth"


@dataclass(frozen=True, slots=True)
class AuthComponents:
    """
    Long-lived, thread-safe collaborators shared by every request.

    :param token_issuer: Signs and validates session tokens.
    :param hasher: Hashes and verifies PINs and passwords.
    :param refresh_store: Durable refresh token records.
    :param merchant_sessions: Session lifecycle of merchant accounts.
    :param staff_sessions: Session lifecycle of staff users.
    """

    token_issuer: TokenIssuer
    hasher: CredentialHasher
    refresh_store: RefreshTokenStore
    merchant_sessions: MerchantSessionService
    staff_sessions: StaffSessionService

    def sessions_for(self, principal_type: str) -> SessionService:
        """Return the session service owning ``principal_type`` tokens.

        :raises ValueError: For an unknown principal type.
        """
        pt = PrincipalType(principal_type)
        return self.merchant_sessions if pt is PrincipalType.MERCHANT else self.staff_sessions


def _build_refresh_store(app: Flask) -> RefreshTokenStore:
    backend = str(app.config.get("REFRESH_TOKEN_BACKEND", "sql")).lower()
    if backend == "redis":
        from merchant_auth.core.extensions import get_redis
        from merchant_auth.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

        return RedisRefreshTokenStore(r=get_redis(app))
    if backend == "sql":
        from merchant_auth.infra.sqlalchemy.refresh_token_store import SQLRefreshTokenStore

        return SQLRefreshTokenStore()
    raise RuntimeError(f"Unknown REFRESH_TOKEN_BACKEND: {backend!r}")


def build_components(app: Flask, *, refresh_store: RefreshTokenStore | None = None) -> AuthComponents:
    """
    Build every component from ``app.config``.

    :param refresh_store: Optional override (tests inject an in-memory store).
    :raises RuntimeError: If production runs with the placeholder secret.
    """
    secret = app.config["JWT_SECRET_KEY"]
    if secret == INSECURE_JWT_SECRET and not (app.debug or app.testing):
        raise RuntimeError("JWT_SECRET_KEY must be set to a private value in production")

    issuer = JWTTokenIssuer(
        secret_key=secret,
        access_ttl=timedelta(seconds=int(app.config["ACCESS_TOKEN_TTL_SECONDS"])),
        refresh_ttl=timedelta(seconds=int(app.config["REFRESH_TOKEN_TTL_SECONDS"])),
        algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
        issuer=app.config.get("JWT_ISSUER"),
    )
    hasher = WerkzeugCredentialHasher(method=app.config["PASSWORD_HASH_METHOD"])
    store = refresh_store if refresh_store is not None else _build_refresh_store(app)
    deps = {"token_issuer": issuer, "refresh_store": store, "hasher": hasher}
    return AuthComponents(
        token_issuer=issuer,
        hasher=hasher,
        refresh_store=store,
        merchant_sessions=MerchantSessionService(**deps),
        staff_sessions=StaffSessionService(**deps),
    )


def init_app(app: Flask) -> None:
    """Build the components once and store them on ``app.extensions``."""
    components = build_components(app)
    app.extensions[EXTENSION_KEY] = components
    log.info(
        "Auth components ready (store=%s, algorithm=%s)",
        type(components.refresh_store).__name__,
        app.config.get("JWT_ALGORITHM", "HS256"),
    )


def get_components() -> AuthComponents:
    """Return the components of the current application."""
    components = current_app.extensions.get(EXTENSION_KEY)
    if components is None:
        raise RuntimeError("Auth components are not initialized. Call security.init_app().")
    return components
