import pytest

from merchant_auth.models import Merchant
from merchant_auth.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from tests.factories.merchant import MerchantFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, app, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(MerchantFactory.build())
            uow.session.flush()

    def test_allows_reads(self, app, db, session):
        MerchantFactory()

        with ROuow() as uow:
            assert uow.session.query(Merchant).count() >= 1

    def test_disallows_commit(self, app, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_blocked_changes_do_not_persist(self, app, db, session):
        merchant = MerchantFactory(name="Original")

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            row = uow.session.get(Merchant, merchant.id)
            row.name = "Mutated"
            uow.session.flush()

        session.expire_all()
        assert session.get(Merchant, merchant.id).name == "Original"
