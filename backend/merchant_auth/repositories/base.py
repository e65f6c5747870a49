"""Generic repository base and query utilities for SQLAlchemy 2.x.

Shared persistence-only concerns:

- Pagination value objects and a counting paginator.
- Whitelisted sorting with a primary-key tiebreaker.
- Whitelisted equality filters and updates (no mass-assignment).

Repositories never call commit/rollback; services own transactions through a
Unit of Work.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from merchant_auth.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


# ------------------------------- Pagination ----------------------------------


@dataclass(slots=True)
class Pagination:
    """Pagination input parameters.

    :param page: 1-based page number.
    :param limit: Page size.
    :param sort: Public sort tokens (e.g., ``["-created_at", "username"]``).
    """

    page: int
    limit: int
    sort: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Page(Generic[E]):
    """Result page with metadata."""

    items: Sequence[E]
    total: int
    page: int
    limit: int


# ----------------------------- Sorting utilities -----------------------------


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse public sort tokens into ``(field, is_desc)`` tuples."""
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        name = (token[1:] if is_desc else token).strip()
        if name:
            parsed.append((name, is_desc))
    return parsed


def _apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply ``ORDER BY`` clauses from a whitelist; unknown tokens are ignored.

    The primary key is always appended as an ascending tiebreaker so pages
    are stable.
    """
    orders: list[Any] = []
    for name, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(name)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())
    if orders:
        stmt = stmt.order_by(*orders)
    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())
    return stmt


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page: int,
    limit: int,
    with_total: bool = True,
) -> tuple[list[Any], int]:
    """Execute ``stmt`` for one page and optionally count all matching rows.

    :returns: ``(items, total)``; ``total`` is 0 when ``with_total`` is false.
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)

    total = 0
    if with_total:
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = int(session.execute(count_stmt).scalar_one())

    sliced = stmt.limit(limit).offset((page - 1) * limit)
    return list(session.execute(sliced).scalars().all()), total


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model`` and MAY override ``_sortable_fields``,
    ``_filterable_fields`` and ``_updatable_fields``.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    # ------------------------------ Internals --------------------------------

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        """Apply whitelisted equality filters; unknown keys are ignored."""
        if not filters:
            return stmt
        allowed = self._filterable_fields()
        clauses = [allowed[k] == v for k, v in filters.items() if k in allowed]
        return stmt.where(and_(*clauses)) if clauses else stmt

    def _sanitize_update_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Return only whitelisted update keys.

        :raises ValueError: If unknown or non-updatable keys are present.
        """
        allowed = self._updatable_fields()
        unknown = sorted(k for k in fields if k not in allowed)
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return dict(fields)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush to surface constraint errors early."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key."""
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        stmt = select(self.model).where(pk_attr == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def exists(self, **filters: Any) -> bool:
        """Check existence for whitelisted equality filters."""
        stmt: Select[Any] = select(func.count()).select_from(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        return bool(self.session.execute(stmt).scalar())

    def flush(self) -> None:
        self.session.flush()

    def assign_updates(self, instance: E, fields: Mapping[str, Any], *, flush: bool = True) -> E:
        """Assign whitelisted keys with ``setattr`` so ``@validates`` hooks run."""
        for key, value in self._sanitize_update_fields(fields).items():
            setattr(instance, key, value)
        if flush:
            self.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        sort: Iterable[str] | None = None,
    ) -> list[E]:
        stmt: Select[Any] = select(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        stmt = _apply_sorting(stmt, self._sortable_fields(), sort or [], pk_attr=self._pk_attr())
        return cast(list[E], list(self.session.execute(stmt).scalars().all()))

    def paginate(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
        with_total: bool = True,
    ) -> Page[E]:
        """Paginate entities with whitelisted filters and stable sorting."""
        stmt: Select[Any] = select(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        stmt = _apply_sorting(
            stmt, self._sortable_fields(), pagination.sort, pk_attr=self._pk_attr()
        )
        items, total = paginate_select(
            self.session, stmt, page=pagination.page, limit=pagination.limit, with_total=with_total
        )
        return Page(items=cast(list[E], items), total=total, page=pagination.page, limit=pagination.limit)
