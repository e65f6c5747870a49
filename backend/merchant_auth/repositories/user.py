"""Staff user repository."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import func, or_, select

from merchant_auth.models.user import STATUS_ACTIVE, User
from merchant_auth.repositories.base import BaseRepository, Page, Pagination


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Every lookup that reaches this repository from a request is tenant-scoped:
    callers pass the merchant id taken from the call identity.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        return {
            "username": User.username,
            "full_name": User.full_name,
            "created_at": User.created_at,
            "last_login_at": User.last_login_at,
        }

    def _filterable_fields(self):
        return {
            "merchant_id": User.merchant_id,
            "status": User.status,
            "role_id": User.role_id,
        }

    def _updatable_fields(self):
        """Publicly allowed updatable fields (password goes through the hasher)."""
        return {"full_name", "role_id", "status", "password_hash"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_in_merchant(self, merchant_id: str, user_id: str) -> User | None:
        """Fetch a user only if it belongs to ``merchant_id``."""
        stmt = select(User).where(User.id == user_id, User.merchant_id == merchant_id)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_login(self, merchant_id: str, login: str) -> User | None:
        """Fetch a user by username or email within one merchant.

        An exact username match wins over an email match, so a username that
        happens to equal another user's email still resolves to its owner.

        :param merchant_id: Owning merchant.
        :param login: Username (exact, trimmed) or email (case-insensitive).
        :returns: User or ``None``.
        """
        value = login.strip()
        by_username = select(User).where(User.merchant_id == merchant_id, User.username == value)
        user = self.session.execute(by_username).scalars().first()
        if user is not None:
            return cast(User, user)
        by_email = select(User).where(User.merchant_id == merchant_id, User.email == value.lower())
        return cast(User | None, self.session.execute(by_email).scalars().first())

    def exists_login(self, merchant_id: str, *, username: str, email: str | None) -> bool:
        """Return ``True`` when the username or email is taken inside the merchant."""
        clauses = [User.username == username.strip()]
        if email:
            clauses.append(User.email == email.strip().lower())
        stmt = select(func.count()).select_from(User).where(
            User.merchant_id == merchant_id, or_(*clauses)
        )
        return bool(self.session.execute(stmt).scalar())

    def list_active_for_merchant(self, merchant_id: str) -> list[User]:
        """Return active staff of a merchant ordered by username."""
        return self.list(filters={"merchant_id": merchant_id, "status": STATUS_ACTIVE}, sort=["username"])

    def paginate_for_merchant(
        self, merchant_id: str, pagination: Pagination, *, status: str | None = None
    ) -> Page[User]:
        filters: dict[str, str] = {"merchant_id": merchant_id}
        if status:
            filters["status"] = status
        return self.paginate(pagination, filters=filters)

    def touch_last_login(self, user: User, when: datetime) -> None:
        user.last_login_at = when
        self.flush()
