"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories, stores,
token issuers and application services.

The translation to HTTP responses (RFC 7807) is handled by
``merchant_auth/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g. ``uq_merchants_phone``).

    Returns
    -------
    bool
        True if the IntegrityError message mentions the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories, stores or domain logic.
    - The API layer translates them to ``APIError`` through ``BaseService``.
    """

    pass


# --------------------------------------------------------------------------- #
# Generic domain errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"


class AuthorizationError(ServiceError):
    """Raised when the caller lacks the permission required by an action."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Authentication & session errors
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    """
    Base class of login failures.

    Every subclass is reported to clients with the same generic message; the
    ``reason`` attribute keeps the internal kind available for logging.
    """

    reason = "authentication_failed"

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class PrincipalNotFound(AuthenticationError):
    """No merchant or staff user matches the identifying attribute."""

    reason = "principal_not_found"


class InvalidCredentials(AuthenticationError):
    """The secret does not match, or a refresh token is not active."""

    reason = "invalid_credentials"


class InactivePrincipal(AuthenticationError):
    """The staff account exists but its status is not ``active``."""

    reason = "inactive_principal"


class FeatureDisabled(ServiceError):
    """The owning merchant has the requested feature switched off."""

    reason = "feature_disabled"

    def __init__(self, feature: str = "user_management") -> None:
        super().__init__(f"Feature '{feature}' is disabled for this merchant")
        self.feature = feature


class TokenError(ServiceError):
    """Base class of signed-token validation failures."""


class InvalidToken(TokenError):
    """Bad signature, malformed token, wrong algorithm or wrong token type."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class ExpiredToken(TokenError):
    """The token verified but its expiry instant has passed."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class StorageError(ServiceError):
    """A durable store failed; the operation outcome is unknown to the caller."""

    def __init__(self, message: str = "Storage failure") -> None:
        super().__init__(message)
