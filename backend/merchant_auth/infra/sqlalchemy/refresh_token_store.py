"""Relational refresh token store built on the Unit of Work."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError

from merchant_auth.models.refresh_token import RefreshToken
from merchant_auth.services._shared.errors import StorageError
from merchant_auth.services._shared.ports import (
    PrincipalType,
    RefreshTokenRecord,
    RefreshTokenStore,
)
from merchant_auth.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=row.id,
        principal_id=row.principal_id,
        principal_type=PrincipalType(row.principal_type),
        token=row.token,
        issued_at=row.issued_at,
        expires_at=row.expires_at,
        revoked=row.revoked,
    )


@dataclass(slots=True)
class SQLRefreshTokenStore(RefreshTokenStore):
    """
    ``refresh_tokens`` table adapter.

    Every method runs in its own short Unit of Work, and every state change is
    a single conditional statement, so no lock outlives a call.

    :param uow_factory: Builds the read-write Unit of Work for each operation.
    :param clock: Source of "now" when the caller does not pass one.
    """

    uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork
    clock: Callable[[], datetime] = field(default=_utcnow)

    @contextmanager
    def _guard(self, operation: str) -> Iterator[SQLAlchemyUnitOfWork]:
        try:
            with self.uow_factory() as uow:
                yield uow
        except SQLAlchemyError as exc:
            log.error("Refresh token store %s failed", operation, exc_info=True)
            raise StorageError(f"Refresh token store {operation} failed") from exc

    # -------------------- API ------------------------

    def create(self, record: RefreshTokenRecord) -> None:
        with self._guard("create") as uow:
            uow.refresh_tokens.add(
                RefreshToken(
                    id=record.id,
                    principal_id=record.principal_id,
                    principal_type=PrincipalType(record.principal_type).value,
                    token=record.token,
                    revoked=record.revoked,
                    issued_at=record.issued_at,
                    expires_at=record.expires_at,
                )
            )

    def find_active(self, token: str, *, now: datetime | None = None) -> RefreshTokenRecord | None:
        with self._guard("find_active") as uow:
            row = uow.refresh_tokens.find_active(token, now or self.clock())
            return _to_record(row) if row is not None else None

    def revoke_active(self, token: str, *, now: datetime | None = None) -> bool:
        with self._guard("revoke_active") as uow:
            return uow.refresh_tokens.revoke_if_active(token, now or self.clock())

    def revoke(self, token: str) -> None:
        with self._guard("revoke") as uow:
            uow.refresh_tokens.revoke_by_token(token)

    def revoke_all(self, principal_id: str) -> int:
        with self._guard("revoke_all") as uow:
            return uow.refresh_tokens.revoke_all_for_principal(principal_id)

    def purge_expired(self, now: datetime) -> int:
        with self._guard("purge_expired") as uow:
            return uow.refresh_tokens.delete_expired(now)
