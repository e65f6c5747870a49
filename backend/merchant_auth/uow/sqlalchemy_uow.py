"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from merchant_auth.core.extensions import db
from merchant_auth.repositories import (
    MerchantRepository,
    PermissionRepository,
    RefreshTokenRepository,
    RoleRepository,
    UserRepository,
)
from merchant_auth.uow.base import UnitOfWork

log = logging.getLogger(__name__)

_ISOLATION_DIALECTS = ("postgresql", "mysql", "mariadb")


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.merchants = MerchantRepository(session=self.session)
        self.users = UserRepository(session=self.session)
        self.roles = RoleRepository(session=self.session)
        self.permissions = PermissionRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    The same session is shared across all repositories for a consistent
    transaction. Commits on a clean exit, rolls back otherwise.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    - Applies ``SET TRANSACTION ISOLATION LEVEL`` and ``SET TRANSACTION READ
      ONLY`` on PostgreSQL/MySQL/MariaDB when it owns the transaction.
    - Installs write guards on the session and connection on every backend.
    - Always rolls back on exit, so ORM instances are expired afterwards;
      callers copy what they need into DTOs inside the ``with`` block.

    :param isolation_level: Optional isolation hint (``"READ COMMITTED"`` by default).
    :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
    """

    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "merge",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
    )

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._conn: Connection | None = None
        self._txn_ctx: SessionTransaction | None = None
        self._listeners_installed = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Own a fresh transaction when possible, else attach to the running one.

        When the session already has a transaction (an outer fixture or an
        earlier statement), the guards are still installed but no
        ``SET TRANSACTION`` directive is issued.
        """
        self._txn_ctx = None
        self._conn = None
        try:
            txn_ctx = self.session.begin()
            txn_ctx.__enter__()
            self._txn_ctx = txn_ctx
        except InvalidRequestError:
            pass

        self._conn = self.session.connection()
        dialect = self._conn.dialect.name
        self._install_listeners()

        if self._txn_ctx is not None and dialect in _ISOLATION_DIALECTS:
            try:
                if self.isolation_level:
                    iso = self.isolation_level.upper().strip()
                    self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {iso}"))
                if self.enforce_db_readonly:
                    self.session.execute(text("SET TRANSACTION READ ONLY"))
            except SQLAlchemyError as exc:
                log.warning("SET TRANSACTION directives failed (%s). Falling back to guards-only.", exc)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._txn_ctx is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                try:
                    self._txn_ctx.__exit__(exc_type, exc, tb)
                finally:
                    self._txn_ctx = None
        finally:
            self._remove_listeners()
            self._conn = None

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guards & Listeners --------------------------

    def _install_listeners(self) -> None:
        """Install ORM and connection listeners rejecting any write attempt."""
        if self._listeners_installed:
            return

        def _before_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

        def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if first_token.startswith(self._WRITE_PREFIXES):
                raise RuntimeError(
                    f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}"
                )

        event.listen(self.session, "before_flush", _before_flush)
        target = self._conn if self._conn is not None else self.session.get_bind()
        event.listen(target, "before_cursor_execute", _before_cursor_execute)

        self._ro_before_flush = _before_flush
        self._ro_before_cursor_execute = _before_cursor_execute
        self._listeners_installed = True

    def _remove_listeners(self) -> None:
        if not self._listeners_installed:
            return
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._ro_before_flush)
        with suppress(InvalidRequestError):
            target = self._conn if self._conn is not None else self.session.get_bind()
            event.remove(target, "before_cursor_execute", self._ro_before_cursor_execute)
        self._listeners_installed = False
