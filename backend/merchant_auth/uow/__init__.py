from merchant_auth.uow.base import UnitOfWork
from merchant_auth.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = ["SQLAlchemyReadOnlyUnitOfWork", "SQLAlchemyUnitOfWork", "UnitOfWork"]
