"""Refresh token repository with single-statement state transitions."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import CursorResult, delete, select, update

from merchant_auth.models.refresh_token import RefreshToken
from merchant_auth.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    Each state transition is one ``UPDATE``/``DELETE`` statement, so it is
    atomic at the database level without holding row locks across calls.
    """

    model = RefreshToken

    def find_active(self, token: str, now: datetime) -> RefreshToken | None:
        stmt = select(RefreshToken).where(
            RefreshToken.token == token,
            RefreshToken.revoked.is_(False),
            RefreshToken.expires_at > now,
        )
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def revoke_if_active(self, token: str, now: datetime) -> bool:
        """Conditionally revoke; ``True`` only for the caller whose update matched."""
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.token == token,
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > now,
            )
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return result.rowcount == 1

    def revoke_by_token(self, token: str) -> int:
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult, self.session.execute(stmt)).rowcount

    def revoke_all_for_principal(self, principal_id: str) -> int:
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.principal_id == principal_id, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult, self.session.execute(stmt)).rowcount

    def delete_expired(self, now: datetime) -> int:
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult, self.session.execute(stmt)).rowcount
