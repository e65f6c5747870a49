"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Placeholder signing secret; refused outside development and testing.
INSECURE_JWT_SECRET: Final[str] = "CHANGE_ME_JWT_SECRET_AT_LEAST_32_BYTES"

load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_SECRET_KEY: str
        Symmetric key used by the token issuer. Must be overridden in
        production.
    JWT_ALGORITHM: str
        HMAC-SHA2 algorithm used for signing (``HS256`` by default).
    JWT_ISSUER: str | None
        Optional ``iss`` claim stamped on and required from every token.
    ACCESS_TOKEN_TTL_SECONDS: int
        Lifetime of access tokens (15 minutes by default).
    REFRESH_TOKEN_TTL_SECONDS: int
        Lifetime of refresh tokens and their server-side records (7 days).
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method string; it carries the cost factor
        (e.g. ``scrypt:32768:8:1`` or ``pbkdf2:sha256:600000``).
    REFRESH_TOKEN_BACKEND: str
        ``"sql"`` (database table) or ``"redis"``.
    REDIS_URL: str | None
        Connection string for the Redis backend.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    IDENTITY_*_HEADER: str
        Inbound metadata attribute names injected by the upstream gateway.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).

    Notes
    -----
    Values are read from the environment once, at import time. Nothing in the
    request path reads configuration; components receive their settings at
    construction.
    """

    API_BASE_PREFIX = "/api"

    # Token signing
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", INSECURE_JWT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER") or None
    ACCESS_TOKEN_TTL_SECONDS = env_int("ACCESS_TOKEN_TTL_SECONDS", 15 * 60)
    REFRESH_TOKEN_TTL_SECONDS = env_int("REFRESH_TOKEN_TTL_SECONDS", 7 * 24 * 60 * 60)

    # Credential hashing
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt:32768:8:1")

    # Refresh token storage
    REFRESH_TOKEN_BACKEND = os.getenv("REFRESH_TOKEN_BACKEND", "sql")
    REDIS_URL = os.getenv("REDIS_URL") or None

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Identity metadata injected by the gateway
    IDENTITY_MERCHANT_HEADER = os.getenv("IDENTITY_MERCHANT_HEADER", "X-Merchant-Id")
    IDENTITY_USER_HEADER = os.getenv("IDENTITY_USER_HEADER", "X-User-Id")
    IDENTITY_EMAIL_HEADER = os.getenv("IDENTITY_EMAIL_HEADER", "X-User-Email")
    IDENTITY_ROLE_HEADER = os.getenv("IDENTITY_ROLE_HEADER", "X-User-Role")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses a cheap PBKDF2 cost so suites stay fast.
    - Always stores refresh tokens in the database.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET_KEY = "testing-secret-key-with-enough-entropy-0123456789"
    JWT_ISSUER = None
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    REFRESH_TOKEN_BACKEND = "sql"
    PROPAGATE_EXCEPTIONS = True
    USE_PROXYFIX = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
