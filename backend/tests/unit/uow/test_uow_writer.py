"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest

from merchant_auth.models import Merchant
from merchant_auth.uow import SQLAlchemyUnitOfWork
from tests.factories.merchant import MerchantFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_commits_on_success(self, app, db, session):
        initial = db.session.query(Merchant).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.merchants.add(MerchantFactory.build())

        assert db.session.query(Merchant).count() == initial + 1

    def test_rolls_back_on_exception(self, app, db, session):
        initial = db.session.query(Merchant).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.merchants.add(MerchantFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(Merchant).count() == initial

    def test_repositories_share_the_session(self, app, db, session):
        with SQLAlchemyUnitOfWork() as uow:
            sessions = {id(repo.session) for repo in (uow.merchants, uow.users, uow.roles, uow.refresh_tokens)}
            assert sessions == {id(uow.session)}
