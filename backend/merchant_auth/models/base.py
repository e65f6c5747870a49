"""Reusable SQLAlchemy mixins shared by domain models (typed 2.0)."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware ``DateTime`` that always round-trips as UTC.

    Backends without native time zones (SQLite) hand back naive values; those
    are labelled UTC on load so comparisons with aware instants stay valid.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


def new_uuid() -> str:
    """Return a random UUID4 rendered as a 36-character string."""
    return str(uuid4())


class TimestampMixin:
    """Provide ``created_at`` and ``updated_at`` timestamp columns.

    Attributes
    ----------
    created_at:
        Timezone-aware timestamp filled by the database on insert.
    updated_at:
        Timezone-aware timestamp refreshed by the database on update.
    """

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class UUIDPKMixin:
    """Expose an opaque string primary key column named ``id``.

    Attributes
    ----------
    id:
        UUID4 string generated client-side on insert.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)


class ReprMixin:
    """Provide a concise ``__repr__`` including the class name and id."""

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        key = getattr(self, "id", None)
        return f"<{cls} id={key}>"
