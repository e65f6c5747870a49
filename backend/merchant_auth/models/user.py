"""Staff user model scoped to a merchant."""

from __future__ import annotations

from datetime import datetime
from typing import Final

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from merchant_auth.core.extensions import db

from .base import ReprMixin, TimestampMixin, UTCDateTime, UUIDPKMixin
from .role import Role

STATUS_ACTIVE: Final[str] = "active"
STATUS_INACTIVE: Final[str] = "inactive"
USER_STATUSES: Final[tuple[str, ...]] = (STATUS_ACTIVE, STATUS_INACTIVE)


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Staff account belonging to exactly one merchant.

    Fields
    ------
    merchant_id : str
        Owning tenant. Immutable after creation.
    username : str
        Login handle, unique within the merchant.
    email : str | None
        Optional login alternative, unique within the merchant, stored lowercase.
    full_name : str | None
        Display name.
    password_hash : str
        Salted hash of the password.
    role_id : str | None
        Zero-or-one role.
    status : str
        ``active`` or ``inactive``; only active users may log in.
    last_login_at : datetime | None
        Stamped on every successful login.
    """

    __tablename__ = "users"

    merchant_id: Mapped[str] = mapped_column(
        ForeignKey("merchants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role_id: Mapped[str | None] = mapped_column(
        ForeignKey("roles.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_ACTIVE)
    last_login_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    role: Mapped[Role | None] = relationship(Role, lazy="selectin")

    __table_args__ = (
        UniqueConstraint("merchant_id", "username", name="uq_users_merchant_id_username"),
        UniqueConstraint("merchant_id", "email", name="uq_users_merchant_id_email"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str | None) -> str | None:
        """
        Normalize and validate email.

        :returns: Lowercased, trimmed email or ``None``.
        :raises ValueError: If the address is malformed.
        """
        if value is None:
            return None
        v = value.strip().lower()
        if not v:
            return None
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Username is required.")
        return value.strip()

    @validates("status")
    def _validate_status(self, key: str, value: str) -> str:
        if value not in USER_STATUSES:
            raise ValueError(f"Unknown status: {value!r}")
        return value
