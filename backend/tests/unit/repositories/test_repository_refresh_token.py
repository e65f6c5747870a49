"""Unit tests for RefreshTokenRepository state transitions."""

from datetime import UTC, datetime, timedelta

import pytest

from merchant_auth.models import RefreshToken
from merchant_auth.repositories.refresh_token import RefreshTokenRepository

NOW = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)


class TestRefreshTokenRepository:
    @pytest.fixture()
    def repo(self):
        return RefreshTokenRepository()

    @pytest.fixture()
    def make_record(self, session):
        def _make(token, *, principal_id="p-1", expires_in=timedelta(hours=1), revoked=False):
            row = RefreshToken(
                id=f"id-{token}",
                principal_id=principal_id,
                principal_type="merchant",
                token=token,
                revoked=revoked,
                issued_at=NOW,
                expires_at=NOW + expires_in,
            )
            session.add(row)
            session.commit()
            return row

        return _make

    def test_find_active(self, repo, make_record):
        make_record("live")
        make_record("dead", revoked=True)
        make_record("old", expires_in=timedelta(seconds=-1))

        assert repo.find_active("live", NOW).id == "id-live"
        assert repo.find_active("dead", NOW) is None
        assert repo.find_active("old", NOW) is None
        assert repo.find_active("live", NOW + timedelta(hours=2)) is None

    def test_revoke_if_active_matches_once(self, repo, make_record):
        make_record("once")

        assert repo.revoke_if_active("once", NOW) is True
        assert repo.revoke_if_active("once", NOW) is False
        assert repo.find_active("once", NOW) is None

    def test_revoke_if_active_skips_expired(self, repo, make_record):
        make_record("late", expires_in=timedelta(seconds=-5))

        assert repo.revoke_if_active("late", NOW) is False

    def test_revoke_all_for_principal(self, repo, make_record):
        make_record("a", principal_id="p-1")
        make_record("b", principal_id="p-1")
        make_record("c", principal_id="p-2")

        assert repo.revoke_all_for_principal("p-1") == 2
        assert repo.revoke_all_for_principal("p-1") == 0
        assert repo.find_active("c", NOW) is not None

    def test_delete_expired(self, repo, make_record):
        make_record("keep")
        make_record("drop", expires_in=timedelta(seconds=-1))

        assert repo.delete_expired(NOW) == 1
        assert repo.get("id-drop") is None
        assert repo.get("id-keep") is not None
