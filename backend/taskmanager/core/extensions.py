"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

import logging
from typing import cast

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

from taskmanager.infra.jwt.pyjwt_token_service import JWTTokenService
from taskmanager.infra.redis.redis_session_store import RedisSessionStore
from taskmanager.services._shared.ports import (
    InMemorySessionStore,
    SessionStore,
    TokenService,
)

log = logging.getLogger(__name__)

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
limiter = Limiter(key_func=get_remote_address)

SESSION_STORE_KEY = "session_store"
TOKEN_SERVICE_KEY = "token_service"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, rate limiting and the auth backends.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`taskmanager.models` package to ensure SQLAlchemy metadata is
        ready for migrations.

    Notes
    -----
    The session store is registered under ``app.extensions["session_store"]``.
    With ``REDIS_URL`` set it is a :class:`RedisSessionStore`; otherwise a
    process-local :class:`InMemorySessionStore` is used, which is only
    suitable for a single worker.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from taskmanager import models as _models  # noqa: F401

    migrate.init_app(app, db)
    limiter.init_app(app)

    app.extensions[TOKEN_SERVICE_KEY] = JWTTokenService.from_config(app.config)

    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        if not app.testing:
            log.warning("REDIS_URL is not set; sessions are kept in process memory.")
        app.extensions[SESSION_STORE_KEY] = InMemorySessionStore()
        return

    redis_client = redis.Redis.from_url(redis_url)
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions[SESSION_STORE_KEY] = RedisSessionStore(
        r=redis_client, prefix=app.config.get("SESSION_KEY_PREFIX", "session:")
    )


def get_session_store() -> SessionStore:
    """Return the session store bound to the current application."""
    store = current_app.extensions.get(SESSION_STORE_KEY)
    if store is None:
        raise RuntimeError("Session store is not initialized. Call init_app() first.")
    return cast(SessionStore, store)


def get_token_service() -> TokenService:
    """Return the token service bound to the current application."""
    service = current_app.extensions.get(TOKEN_SERVICE_KEY)
    if service is None:
        raise RuntimeError("Token service is not initialized. Call init_app() first.")
    return cast(TokenService, service)
