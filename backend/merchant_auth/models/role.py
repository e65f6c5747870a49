"""Role and permission catalog models."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, ForeignKey, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from merchant_auth.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

role_permissions = Table(
    "role_permissions",
    db.metadata,
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Permission(UUIDPKMixin, ReprMixin, db.Model):
    """
    Catalog entry naming one guarded action.

    Fields
    ------
    code : str
        Stable dotted identifier checked by the authorization gate (``user.create``).
    name : str
        Human readable label.
    description : str | None
        Optional longer explanation.
    module : str
        Functional area used to group the catalog (``users``, ``roles``).
    """

    __tablename__ = "permissions"

    code: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    module: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (UniqueConstraint("code", name="uq_permissions_code"),)


class Role(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Named set of permissions.

    A role either belongs to one merchant or, when ``merchant_id`` is ``None``
    and ``is_system`` is set, is shared by every merchant.
    """

    __tablename__ = "roles"

    merchant_id: Mapped[str | None] = mapped_column(
        ForeignKey("merchants.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    permissions: Mapped[list[Permission]] = relationship(
        Permission, secondary=role_permissions, lazy="selectin", order_by=Permission.code
    )

    __table_args__ = (UniqueConstraint("merchant_id", "name", name="uq_roles_merchant_id_name"),)

    @property
    def permission_codes(self) -> frozenset[str]:
        return frozenset(p.code for p in self.permissions)
