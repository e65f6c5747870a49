"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Service commits
only release their own SAVEPOINT; the outer transaction is rolled back when
the test ends.
"""

from __future__ import annotations

import os
from datetime import timedelta

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from merchant_auth.core.config import TestingConfig
from merchant_auth.core.extensions import db as _db  # Flask-SQLAlchemy instance
from merchant_auth.factory import create_app  # application factory under test
from merchant_auth.infra.jwt.jwt_token_issuer import JWTTokenIssuer
from merchant_auth.infra.security.credentials import WerkzeugCredentialHasher
from merchant_auth.services._shared.ports import InMemoryRefreshTokenStore

TEST_SECRET = TestingConfig.JWT_SECRET_KEY
TEST_HASH_METHOD = TestingConfig.PASSWORD_HASH_METHOD


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    pysqlite's own transaction handling breaks SAVEPOINTs, so the driver is
    switched to autocommit and SQLAlchemy emits ``BEGIN`` itself.
    """
    with app.app_context():
        engine = _db.engine

        @event.listens_for(engine, "connect")
        def _sqlite_autocommit(dbapi_connection, _record):  # pragma: no cover - driver glue
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _sqlite_begin(conn):  # pragma: no cover - driver glue
            conn.exec_driver_sql("BEGIN")

        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in an outer transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; ``commit()`` releases a
        SAVEPOINT and everything is rolled back after each test.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, join_transaction_mode="create_savepoint")
    scoped = scoped_session(SessionFactory)

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Auth collaborators ---------------------------------------------------------
@pytest.fixture()
def hasher() -> WerkzeugCredentialHasher:
    """Cheap hasher so factories and services stay fast."""
    return WerkzeugCredentialHasher(method=TEST_HASH_METHOD)


@pytest.fixture()
def token_issuer() -> JWTTokenIssuer:
    return JWTTokenIssuer(
        secret_key=TEST_SECRET,
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
    )


@pytest.fixture()
def memory_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
    SQLAlchemySession.set(None)
