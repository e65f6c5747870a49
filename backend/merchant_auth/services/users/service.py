"""
UserService
===========

Tenant-scoped management of staff accounts:

- Listing and detail, always filtered by the caller's merchant.
- Creation with a hashed password and an optional visible role.
- Updates of name, role, status and password; deactivation and password
  changes revoke every refresh token of the user.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from merchant_auth.models.user import USER_STATUSES, User
from merchant_auth.repositories.base import Page
from merchant_auth.services._shared.base import BaseService
from merchant_auth.services._shared.context import RequestIdentity
from merchant_auth.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ServiceError,
    violates,
)
from merchant_auth.services._shared.ports import CredentialHasher, RefreshTokenStore
from merchant_auth.services.users._converters import user_to_out
from merchant_auth.services.users.dto import StaffUserOut, UserCreateIn, UserUpdateIn

log = logging.getLogger(__name__)


class UserService(BaseService):
    """
    Application service for the staff ``User`` aggregate.

    :param hasher: Hashes new passwords.
    :param refresh_store: Used to revoke sessions when access is withdrawn.
    """

    def __init__(self, *, hasher: CredentialHasher, refresh_store: RefreshTokenStore) -> None:
        super().__init__()
        self.hasher = hasher
        self.refresh_store = refresh_store

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def list_users(
        self,
        identity: RequestIdentity,
        *,
        page: int = 1,
        limit: int = 20,
        sort: list[str] | None = None,
        status: str | None = None,
    ) -> Page[StaffUserOut]:
        """Return one page of the merchant's staff."""
        pagination = self.ensure_pagination(page=page, limit=limit, sort=sort or ["username"])
        with self.ro_uow() as uow:
            result = uow.users.paginate_for_merchant(identity.merchant_id, pagination, status=status)
            return Page(
                items=[user_to_out(u) for u in result.items],
                total=result.total,
                page=result.page,
                limit=result.limit,
            )

    def get_user(self, identity: RequestIdentity, user_id: str) -> StaffUserOut:
        """
        :raises NotFoundError: If the user does not exist in the caller's merchant.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_in_merchant(identity.merchant_id, user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return user_to_out(user)

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def create_user(self, identity: RequestIdentity, dto: UserCreateIn) -> StaffUserOut:
        """
        Create a staff user in the caller's merchant.

        :raises ConflictError: If the username or email is already used in the merchant.
        :raises NotFoundError: If ``role_id`` is not visible to the merchant.
        """
        password_hash = self._hash(dto.password)
        merchant_id = identity.merchant_id
        with self.rw_uow() as uow:
            if uow.users.exists_login(merchant_id, username=dto.username, email=dto.email):
                raise ConflictError("User", "username or email already in use")
            if dto.role_id is not None and uow.roles.get_visible(merchant_id, dto.role_id) is None:
                raise NotFoundError("Role", dto.role_id)
            try:
                user = uow.users.add(
                    User(
                        merchant_id=merchant_id,
                        username=dto.username,
                        email=dto.email,
                        full_name=dto.full_name,
                        password_hash=password_hash,
                        role_id=dto.role_id,
                    )
                )
            except IntegrityError as exc:
                if violates(exc, "uq_users_merchant_id_username") or violates(
                    exc, "uq_users_merchant_id_email"
                ):
                    raise ConflictError("User", "username or email already in use") from exc
                raise
            user_id = user.id
        log.info("Staff user created", extra={"merchant_id": merchant_id, "user_id": user_id})
        return self.get_user(identity, user_id)

    def update_user(self, identity: RequestIdentity, user_id: str, dto: UserUpdateIn) -> StaffUserOut:
        """
        Apply a partial update.

        :raises NotFoundError: Unknown user or role in the caller's merchant.
        :raises ServiceError: Unknown status value.
        """
        fields: dict[str, object] = {}
        if dto.full_name is not None:
            fields["full_name"] = dto.full_name
        if dto.status is not None:
            if dto.status not in USER_STATUSES:
                raise ServiceError(f"Unknown status: {dto.status}")
            fields["status"] = dto.status
        if dto.password is not None:
            fields["password_hash"] = self._hash(dto.password)

        with self.rw_uow() as uow:
            user = uow.users.get_in_merchant(identity.merchant_id, user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            if dto.clear_role:
                fields["role_id"] = None
            elif dto.role_id is not None:
                if uow.roles.get_visible(identity.merchant_id, dto.role_id) is None:
                    raise NotFoundError("Role", dto.role_id)
                fields["role_id"] = dto.role_id
            was_active = user.is_active
            uow.users.assign_updates(user, fields)
            withdraw = (was_active and not user.is_active) or "password_hash" in fields

        if withdraw:
            revoked = self.refresh_store.revoke_all(user_id)
            log.info(
                "Staff sessions revoked",
                extra={"merchant_id": identity.merchant_id, "user_id": user_id, "reason": "access_changed"},
            )
            log.debug("Revoked %d refresh tokens", revoked)
        return self.get_user(identity, user_id)

    def _hash(self, password: str) -> str:
        try:
            return self.hasher.hash(password)
        except ValueError as exc:
            raise ServiceError(str(exc)) from exc
