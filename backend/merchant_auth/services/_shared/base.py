# merchant_auth/services/_shared/base.py
from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from merchant_auth.core import errors as api_errors
from merchant_auth.repositories.base import Pagination
from merchant_auth.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    FeatureDisabled,
    NotFoundError,
    ServiceError,
    StorageError,
    TokenError,
)
from merchant_auth.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

#: Single message for every login failure so callers cannot enumerate accounts.
GENERIC_CREDENTIALS_MESSAGE = "Invalid credentials"


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize translation of domain errors into API errors.
    * Offer shared validation helpers (pagination).

    Notes
    -----
    - Services never touch the global session; always use a Unit of Work.
    - Call identity is passed explicitly to every method that needs it.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED").
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(
        self, *, page: int, limit: int, sort: Iterable[str] | None = None
    ) -> Pagination:
        """Build a :class:`Pagination` value object with basic clamping."""
        page = max(1, int(page))
        limit = min(max(1, int(limit)), 100)
        return Pagination(page=page, limit=limit, sort=list(sort or []))

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        Login failures of every kind collapse into one ``invalid_credentials``
        answer; the distinct kind is only visible in logs.

        :param exc: Exception raised within the service.
        :returns: Translated exception ready to be re-raised.
        """
        if isinstance(exc, AuthenticationError):
            return api_errors.Unauthorized(GENERIC_CREDENTIALS_MESSAGE, code="invalid_credentials")

        if isinstance(exc, TokenError):
            return api_errors.Unauthorized(str(exc))

        if isinstance(exc, FeatureDisabled):
            return api_errors.Forbidden(str(exc), code="feature_disabled")

        if isinstance(exc, AuthorizationError):
            return api_errors.Forbidden(str(exc))

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            return api_errors.Conflict(str(exc))

        if isinstance(exc, StorageError):
            return api_errors.APIError(
                message="Internal error",
                status_code=500,
                code="internal_server_error",
            )

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
