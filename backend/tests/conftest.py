"""Pytest fixtures for an isolated application per test.

Each test gets a fresh app bound to an in-memory SQLite database whose schema
is created and dropped around the test, and a fakeredis-backed session store.
"""

from __future__ import annotations

import fakeredis
import pytest

from taskmanager.core.config import TestingConfig
from taskmanager.core.extensions import SESSION_STORE_KEY
from taskmanager.core.extensions import db as _db
from taskmanager.factory import create_app
from taskmanager.infra.redis.redis_session_store import RedisSessionStore


@pytest.fixture()
def app():
    """Create a Flask application configured for testing.

    Yields
    ------
    flask.Flask
        Application with :class:`TestingConfig`, an app context pushed and
        all tables created.
    """
    app = create_app(TestingConfig)
    app.logger.setLevel("WARNING")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def db(app):
    """Return the database extension bound to the testing app."""
    return _db


@pytest.fixture()
def session(db):
    """Return the Flask-scoped SQLAlchemy session used by the app code."""
    return db.session


@pytest.fixture()
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture()
def session_store(app, fake_redis):
    """Replace the app's session store with a fakeredis-backed one."""
    store = RedisSessionStore(r=fake_redis, prefix=app.config["SESSION_KEY_PREFIX"])
    app.extensions[SESSION_STORE_KEY] = store
    return store


@pytest.fixture()
def client(app, session_store):
    """Flask test client wired to the fakeredis session store."""
    return app.test_client()


# -- Hook up Factory Boy to the Flask-SQLAlchemy session -----------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when the test uses the database."""
    from tests.factories import SQLAlchemySession

    if "app" in request.fixturenames:
        SQLAlchemySession.set(_db.session)
    yield
    SQLAlchemySession.set(None)
