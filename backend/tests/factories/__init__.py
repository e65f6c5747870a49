"""Factory Boy helpers wired to the project's SQLAlchemy session."""

from __future__ import annotations

import factory

from merchant_auth.infra.security.credentials import WerkzeugCredentialHasher
from merchant_auth.core.config import TestingConfig

#: Hasher used to build stored PIN/password digests for fixtures.
FIXTURE_HASHER = WerkzeugCredentialHasher(method=TestingConfig.PASSWORD_HASH_METHOD)


class SQLAlchemySession:
    """Store the session provided by the pytest fixture layer."""

    _session = None

    @classmethod
    def set(cls, session):
        """Register the SQLAlchemy session used to persist factory objects."""
        cls._session = session

    @classmethod
    def get(cls):
        """Return the registered SQLAlchemy session.

        Raises
        ------
        RuntimeError
            If factories are used without the ``session`` fixture wiring.
        """
        if cls._session is None:
            raise RuntimeError("Factories session not set. Did you pass the 'session' fixture?")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base class configuring Factory Boy for the transactional session."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        # Services open their own units of work, so fixtures must be committed.
        sqlalchemy_session_persistence = "commit"
