"""
merchant_auth.services._shared.ports
====================================

Collection of *ports* (hexagonal interfaces) that define the contracts
for credential hashing, token issuance and refresh token storage.

Modules
-------
- :mod:`credential_hasher`:
    Defines :class:`~.CredentialHasher`: salted one-way hashing of secrets.

- :mod:`token_provider`:
    Defines :class:`~.TokenIssuer` and :class:`~.TokenClaims`: signed token
    creation and validation.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore`, :class:`~.RefreshTokenRecord` and
    :class:`~.PrincipalType`, plus an in-memory implementation for tests.

Design Notes
------------
Concrete adapters (SQL, Redis, PyJWT, werkzeug) implement these interfaces
under ``merchant_auth.infra``.
"""

from __future__ import annotations

from .credential_hasher import CredentialHasher
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    PrincipalType,
    RefreshTokenRecord,
    RefreshTokenStore,
)
from .token_provider import ACCESS, REFRESH, TokenClaims, TokenIssuer

__all__ = [
    "ACCESS",
    "REFRESH",
    "CredentialHasher",
    "InMemoryRefreshTokenStore",
    "PrincipalType",
    "RefreshTokenRecord",
    "RefreshTokenStore",
    "TokenClaims",
    "TokenIssuer",
]
