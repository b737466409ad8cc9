"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Token and session lifetimes in seconds; clients depend on these values.
ACCESS_TOKEN_SECONDS: Final[int] = 1800
REFRESH_TOKEN_SECONDS: Final[int] = 604800
SESSION_TTL_SECONDS: Final[int] = 604800


# Loads .env during development (no-op when the file is missing)
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
    SECRET_KEY: str
        Flask secret. Defaults to a development-safe placeholder and should be
        overridden in production.
    JWT_SECRET_KEY: str
        HMAC key used to sign access tokens.
    JWT_REFRESH_SECRET_KEY: str
        HMAC key used to sign refresh tokens. Must differ from
        ``JWT_SECRET_KEY`` so one token kind can never verify as the other.
    JWT_ALGORITHM: str
        Signing algorithm passed to PyJWT.
    ACCESS_TOKEN_EXPIRES: int
        Access token lifetime in seconds (1800).
    REFRESH_TOKEN_EXPIRES: int
        Refresh token lifetime in seconds (604800).
    SESSION_TTL: int
        Time-to-live of the per-user session record in seconds (604800).
    SESSION_KEY_PREFIX: str
        Key namespace for session records in Redis.
    REDIS_URL: str | None
        Connection URL of the session store. When unset, sessions live in a
        process-local in-memory store.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    EXPOSE_ERROR_DETAILS: bool
        Adds the internal ``error`` field to error envelopes when ``True``.
    RATELIMIT_DEFAULT: str
        Global Flask-Limiter budget per client address.
    AUTH_LOGIN_RATE_LIMIT: str
        Additional budget applied to the login endpoint.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    APP_ENV = "development"
    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_REFRESH_SECRET_KEY = os.getenv("JWT_REFRESH_SECRET_KEY", "CHANGE_ME_JWT_REFRESH")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES = env_int("ACCESS_TOKEN_EXPIRES", ACCESS_TOKEN_SECONDS)
    REFRESH_TOKEN_EXPIRES = env_int("REFRESH_TOKEN_EXPIRES", REFRESH_TOKEN_SECONDS)

    # Sessions
    SESSION_TTL = env_int("SESSION_TTL", SESSION_TTL_SECONDS)
    SESSION_KEY_PREFIX = os.getenv("SESSION_KEY_PREFIX", "session:")
    REDIS_URL = os.getenv("REDIS_URL")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    EXPOSE_ERROR_DETAILS = False

    # Rate limiting (Flask-Limiter)
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "100 per 15 minutes")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_HEADERS_ENABLED = True
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "10 per minute")

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and exposes internal error details in error
    responses.
    """

    APP_ENV = "development"
    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    EXPOSE_ERROR_DETAILS = True
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables rate limiting.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never connects to a real Redis; fixtures inject a fake session store.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    REDIS_URL = None
    RATELIMIT_ENABLED = False
    EXPOSE_ERROR_DETAILS = True
    JWT_SECRET_KEY = "test-access-secret-0123456789abcdef"
    JWT_REFRESH_SECRET_KEY = "test-refresh-secret-0123456789abcdef"
    USE_PROXYFIX = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled and never exposes internal error
    details to clients.
    """

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    EXPOSE_ERROR_DETAILS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
