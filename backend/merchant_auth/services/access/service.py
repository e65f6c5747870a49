"""
AccessService
=============

Authorization gate for staff actions plus the role/permission catalog.

The decision uses only the database: an owner identity (no user id) holds
every permission; a staff identity must resolve to an active user of the
same merchant whose role carries the required code. The role label forwarded
in call metadata is never trusted.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from merchant_auth.models.role import Permission, Role
from merchant_auth.services._shared.base import BaseService
from merchant_auth.services._shared.context import RequestIdentity
from merchant_auth.services._shared.errors import (
    AuthorizationError,
    ConflictError,
    ServiceError,
    violates,
)
from merchant_auth.services.access.dto import PermissionOut, RoleCreateIn, RoleOut

log = logging.getLogger(__name__)

# Permission codes guarded by the API.
USER_VIEW = "user.view"
USER_CREATE = "user.create"
USER_UPDATE = "user.update"
ROLE_VIEW = "role.view"
ROLE_CREATE = "role.create"


def permission_to_out(row: Permission) -> PermissionOut:
    return PermissionOut(code=row.code, name=row.name, description=row.description, module=row.module)


def role_to_out(row: Role) -> RoleOut:
    return RoleOut(
        id=row.id,
        merchant_id=row.merchant_id,
        name=row.name,
        description=row.description,
        is_system=row.is_system,
        permissions=tuple(sorted(row.permission_codes)),
    )


class AccessService(BaseService):
    """Application service for roles, permissions and authorization decisions."""

    def permissions_for(self, identity: RequestIdentity) -> frozenset[str] | None:
        """
        Resolve the effective permission set of a call identity.

        :returns: ``None`` for the merchant owner (unrestricted), otherwise the
            codes granted to the staff user; empty when the user is unknown,
            inactive or without a role.
        """
        if identity.is_owner:
            return None
        with self.ro_uow() as uow:
            user = uow.users.get_in_merchant(identity.merchant_id, identity.user_id)
            if user is None or not user.is_active or user.role is None:
                return frozenset()
            return user.role.permission_codes

    def ensure_permission(self, identity: RequestIdentity, code: str) -> None:
        """
        Raise unless ``identity`` may perform the action guarded by ``code``.

        :raises AuthorizationError: When the permission is missing.
        """
        granted = self.permissions_for(identity)
        if granted is None or code in granted:
            return
        log.warning(
            "Permission denied",
            extra={"merchant_id": identity.merchant_id, "user_id": identity.user_id, "reason": code},
        )
        raise AuthorizationError(f"Missing permission: {code}")

    # ------------------------------------------------------------------ #
    # Catalog
    # ------------------------------------------------------------------ #

    def list_permissions(self) -> list[PermissionOut]:
        with self.ro_uow() as uow:
            return [permission_to_out(p) for p in uow.permissions.catalog()]

    def list_roles(self, identity: RequestIdentity) -> list[RoleOut]:
        with self.ro_uow() as uow:
            return [role_to_out(r) for r in uow.roles.visible_to(identity.merchant_id)]

    def create_role(self, identity: RequestIdentity, dto: RoleCreateIn) -> RoleOut:
        """
        Create a merchant-owned role.

        :raises ServiceError: If a permission code is unknown or the name is blank.
        :raises ConflictError: If the merchant already has a role with that name.
        """
        name = dto.name.strip()
        if not name:
            raise ServiceError("Role name is required")
        with self.rw_uow() as uow:
            if uow.roles.name_taken(identity.merchant_id, name):
                raise ConflictError("Role", "name already in use")
            permissions = uow.permissions.get_many_by_code(dto.permissions)
            missing = sorted(set(dto.permissions) - {p.code for p in permissions})
            if missing:
                raise ServiceError(f"Unknown permission codes: {', '.join(missing)}")
            role = Role(
                merchant_id=identity.merchant_id,
                name=name,
                description=dto.description,
                is_system=False,
            )
            role.permissions = permissions
            try:
                uow.roles.add(role)
            except IntegrityError as exc:
                if violates(exc, "uq_roles_merchant_id_name"):
                    raise ConflictError("Role", "name already in use") from exc
                raise
            return role_to_out(role)
