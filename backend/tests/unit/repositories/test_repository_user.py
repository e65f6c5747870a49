"""Unit tests for UserRepository."""

import pytest

from merchant_auth.models import STATUS_INACTIVE
from merchant_auth.repositories.base import Pagination
from merchant_auth.repositories.user import UserRepository
from tests.factories.merchant import MerchantFactory
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` lookups stay inside one merchant."""

    @pytest.fixture()
    def repo(self):
        return UserRepository()

    @pytest.fixture()
    def merchant(self):
        return MerchantFactory(user_management=True)

    def test_get_by_login_matches_username_or_email(self, repo, merchant):
        u = UserFactory(merchant_id=merchant.id, username="alice", email="alice@shop.example")

        assert repo.get_by_login(merchant.id, "alice").id == u.id
        assert repo.get_by_login(merchant.id, "  alice ").id == u.id
        assert repo.get_by_login(merchant.id, "ALICE@Shop.Example").id == u.id
        assert repo.get_by_login(merchant.id, "bob") is None

    def test_get_by_login_prefers_username_over_email(self, repo, merchant):
        owner = UserFactory(merchant_id=merchant.id, username="carol", email="dave@shop.example")
        squatter = UserFactory(merchant_id=merchant.id, username="dave@shop.example", email="x@shop.example")

        assert repo.get_by_login(merchant.id, "dave@shop.example").id == squatter.id
        assert repo.get_by_login(merchant.id, "DAVE@shop.example").id == owner.id

    def test_get_by_login_ignores_other_merchants(self, repo, merchant):
        UserFactory(username="alice")

        assert repo.get_by_login(merchant.id, "alice") is None

    def test_get_in_merchant(self, repo, merchant):
        mine = UserFactory(merchant_id=merchant.id)
        theirs = UserFactory()

        assert repo.get_in_merchant(merchant.id, mine.id).id == mine.id
        assert repo.get_in_merchant(merchant.id, theirs.id) is None

    def test_exists_login(self, repo, merchant):
        UserFactory(merchant_id=merchant.id, username="carol", email="carol@shop.example")

        assert repo.exists_login(merchant.id, username="carol", email=None)
        assert repo.exists_login(merchant.id, username="other", email="Carol@Shop.Example")
        assert not repo.exists_login(merchant.id, username="other", email="other@shop.example")
        assert not repo.exists_login(MerchantFactory().id, username="carol", email=None)

    def test_list_active_for_merchant(self, repo, merchant):
        UserFactory(merchant_id=merchant.id, username="zed")
        UserFactory(merchant_id=merchant.id, username="amy")
        UserFactory(merchant_id=merchant.id, username="gone", status=STATUS_INACTIVE)

        assert [u.username for u in repo.list_active_for_merchant(merchant.id)] == ["amy", "zed"]

    def test_paginate_for_merchant_with_status(self, repo, merchant):
        UserFactory(merchant_id=merchant.id)
        UserFactory(merchant_id=merchant.id, status=STATUS_INACTIVE)

        page = repo.paginate_for_merchant(merchant.id, Pagination(page=1, limit=10), status=STATUS_INACTIVE)

        assert page.total == 1
        assert page.items[0].status == STATUS_INACTIVE

    def test_safe_update_fields(self, repo, merchant):
        """Assign whitelisted fields and reject disallowed keys."""
        u = UserFactory(merchant_id=merchant.id)

        updated = repo.assign_updates(u, {"full_name": "New Name"})
        assert updated.full_name == "New Name"

        with pytest.raises(ValueError):
            repo.assign_updates(u, {"merchant_id": "elsewhere"})
