"""
Request context propagation.

Every non-public call must carry the merchant identity injected by the
upstream gateway (which has already validated the access token). The gate
runs before any view, builds an immutable :class:`RequestIdentity` from the
configured headers and binds it to ``flask.g`` once per request.

This module performs no signature validation: deployments must keep the
service behind a gateway that strips client-supplied identity headers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final, TypeVar

from flask import Flask, g, request

from merchant_auth.core.errors import Unauthorized
from merchant_auth.services._shared.context import RequestIdentity

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

PUBLIC_ATTR: Final[str] = "_public_endpoint"
IDENTITY_KEY: Final[str] = "request_identity"


DEFAULT_MERCHANT_HEADER: Final[str] = "X-Merchant-Id"
DEFAULT_USER_HEADER: Final[str] = "X-User-Id"
DEFAULT_EMAIL_HEADER: Final[str] = "X-User-Email"
DEFAULT_ROLE_HEADER: Final[str] = "X-User-Role"


@dataclass(frozen=True, slots=True)
class IdentityHeaders:
    """Names of the inbound headers carrying the call identity."""

    merchant: str = DEFAULT_MERCHANT_HEADER
    user: str = DEFAULT_USER_HEADER
    email: str = DEFAULT_EMAIL_HEADER
    role: str = DEFAULT_ROLE_HEADER

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> IdentityHeaders:
        """Read header names from ``config``, falling back to the defaults."""
        return cls(
            merchant=config.get("IDENTITY_MERCHANT_HEADER") or DEFAULT_MERCHANT_HEADER,
            user=config.get("IDENTITY_USER_HEADER") or DEFAULT_USER_HEADER,
            email=config.get("IDENTITY_EMAIL_HEADER") or DEFAULT_EMAIL_HEADER,
            role=config.get("IDENTITY_ROLE_HEADER") or DEFAULT_ROLE_HEADER,
        )


def public_endpoint(view: F) -> F:
    """Mark ``view`` as reachable without a call identity."""
    setattr(view, PUBLIC_ATTR, True)
    return view


def is_public(view: Callable[..., Any] | None) -> bool:
    return bool(getattr(view, PUBLIC_ATTR, False))


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def extract_identity(headers: Mapping[str, str], names: IdentityHeaders) -> RequestIdentity | None:
    """
    Build the identity from inbound headers.

    :returns: ``None`` when the merchant header is absent or blank; the
        optional user, email and role headers are attached when present.
    """
    merchant_id = _header(headers, names.merchant)
    if merchant_id is None:
        return None
    return RequestIdentity(
        merchant_id=merchant_id,
        user_id=_header(headers, names.user),
        email=_header(headers, names.email),
        role=_header(headers, names.role),
    )


def bind_identity(identity: RequestIdentity) -> None:
    """Attach ``identity`` to the current request; a second bind is an error."""
    if g.get(IDENTITY_KEY) is not None:
        raise RuntimeError("Request identity is already bound")
    setattr(g, IDENTITY_KEY, identity)


def get_identity() -> RequestIdentity | None:
    return g.get(IDENTITY_KEY)


def require_identity() -> RequestIdentity:
    """Return the bound identity; views behind the gate always have one."""
    identity = get_identity()
    if identity is None:
        raise RuntimeError("No request identity bound; is the endpoint marked public?")
    return identity


def init_app(app: Flask) -> None:
    """Register the identity gate as a ``before_request`` hook."""

    names = IdentityHeaders.from_config(app.config)

    @app.before_request
    def _identity_gate():
        endpoint = request.endpoint
        # Unmatched routes fall through to the 404 handler.
        if endpoint is None or endpoint == "static":
            return None
        if is_public(app.view_functions.get(endpoint)):
            return None
        identity = extract_identity(request.headers, names)
        if identity is None:
            log.warning("Missing call identity", extra={"endpoint": endpoint})
            raise Unauthorized("Missing merchant identity", code="unauthenticated")
        bind_identity(identity)
        return None

    @app.teardown_request
    def _release_identity(_exc: BaseException | None) -> None:
        # The app context, and so ``g``, may outlive a single request.
        g.pop(IDENTITY_KEY, None)


__all__ = [
    "IdentityHeaders",
    "bind_identity",
    "extract_identity",
    "get_identity",
    "init_app",
    "is_public",
    "public_endpoint",
    "require_identity",
]
