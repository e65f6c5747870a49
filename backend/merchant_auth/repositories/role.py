"""Role and permission repositories."""

from __future__ import annotations

from collections.abc import Iterable
from typing import cast

from sqlalchemy import or_, select

from merchant_auth.models.role import Permission, Role
from merchant_auth.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    """Persistence-only repository for :class:`Role`."""

    model = Role

    def _sortable_fields(self):
        return {"name": Role.name, "created_at": Role.created_at}

    def visible_to(self, merchant_id: str) -> list[Role]:
        """Roles owned by ``merchant_id`` plus shared system roles."""
        stmt = (
            select(Role)
            .where(or_(Role.merchant_id == merchant_id, Role.merchant_id.is_(None)))
            .order_by(Role.is_system.desc(), Role.name.asc(), Role.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def get_visible(self, merchant_id: str, role_id: str) -> Role | None:
        """Fetch a role if the merchant may assign it."""
        stmt = select(Role).where(
            Role.id == role_id,
            or_(Role.merchant_id == merchant_id, Role.merchant_id.is_(None)),
        )
        return cast(Role | None, self.session.execute(stmt).scalars().first())

    def get_system(self, name: str) -> Role | None:
        stmt = select(Role).where(Role.merchant_id.is_(None), Role.name == name)
        return cast(Role | None, self.session.execute(stmt).scalars().first())

    def name_taken(self, merchant_id: str, name: str) -> bool:
        stmt = select(Role.id).where(Role.merchant_id == merchant_id, Role.name == name.strip())
        return self.session.execute(stmt).first() is not None


class PermissionRepository(BaseRepository[Permission]):
    """Persistence-only repository for :class:`Permission`."""

    model = Permission

    def _sortable_fields(self):
        return {"code": Permission.code, "module": Permission.module}

    def get_by_code(self, code: str) -> Permission | None:
        stmt = select(Permission).where(Permission.code == code)
        return cast(Permission | None, self.session.execute(stmt).scalars().first())

    def get_many_by_code(self, codes: Iterable[str]) -> list[Permission]:
        wanted = sorted(set(codes))
        if not wanted:
            return []
        stmt = select(Permission).where(Permission.code.in_(wanted)).order_by(Permission.code)
        return list(self.session.execute(stmt).scalars().all())

    def catalog(self) -> list[Permission]:
        return self.list(sort=["module", "code"])
