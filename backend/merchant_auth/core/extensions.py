"""Extension singletons shared by the whole application."""

from __future__ import annotations

import redis
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError
from sqlalchemy import MetaData

# Constraint names are stable across dialects; services match on them.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    session_options={"autoflush": False},
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
)

REDIS_EXTENSION_KEY = "redis_client"


def _connect_redis(url: str) -> redis.Redis:
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Redis at {url!r} is unreachable") from exc
    return client


def init_app(app: Flask) -> None:
    """Bind the database and, for the Redis token backend, open the client.

    A Redis backend without ``REDIS_URL``, or an unreachable server, stops the
    application at startup rather than on the first login.
    """
    db.init_app(app)

    from merchant_auth import models as _models  # noqa: F401  (register tables)

    backend = str(app.config.get("REFRESH_TOKEN_BACKEND", "sql")).lower()
    redis_url = app.config.get("REDIS_URL")
    if backend != "redis":
        app.extensions.pop(REDIS_EXTENSION_KEY, None)
        return
    if not redis_url:
        raise RuntimeError("REFRESH_TOKEN_BACKEND=redis requires REDIS_URL")
    app.extensions[REDIS_EXTENSION_KEY] = _connect_redis(redis_url)


def get_redis(app: Flask | None = None) -> redis.Redis:
    """Return the Redis client of ``app`` (default: the current application)."""
    if app is None:
        from flask import current_app

        app = current_app._get_current_object()  # type: ignore[attr-defined]
    client = app.extensions.get(REDIS_EXTENSION_KEY)
    if client is None:
        raise RuntimeError("Redis client is not initialized; set REFRESH_TOKEN_BACKEND=redis and REDIS_URL")
    return client
