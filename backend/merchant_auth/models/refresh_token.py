"""Server-side records of issued refresh tokens."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from merchant_auth.core.extensions import db

from .base import ReprMixin, UTCDateTime


class RefreshToken(ReprMixin, db.Model):
    """
    One refresh token issuance.

    A row is *active* while ``revoked`` is false and ``expires_at`` lies in
    the future. Rows only ever move from active to revoked, and expired rows
    are deleted by the periodic purge.
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    principal_id: Mapped[str] = mapped_column(String(36), nullable=False)
    principal_type: Mapped[str] = mapped_column(String(16), nullable=False)
    token: Mapped[str] = mapped_column(String(1024), nullable=False)
    revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    issued_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    __table_args__ = (
        UniqueConstraint("token", name="uq_refresh_tokens_token"),
        Index("ix_refresh_tokens_principal_id", "principal_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )
