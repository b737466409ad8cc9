# tests/unit/services/test_auth_service.py
from __future__ import annotations

import pytest

from taskmanager.models import User
from taskmanager.services._shared.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    MissingInputError,
    SessionNotFoundError,
    TokenMismatchError,
)
from taskmanager.services._shared.ports import SessionPair, TokenKind
from taskmanager.services.auth.dto import LoginIn, RefreshIn, RegisterIn
from taskmanager.services.auth.service import AuthService
from tests.factories.user import DEFAULT_PASSWORD, UserFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def service(app, tokens, sessions) -> AuthService:
    """AuthService wired to the real JWT adapter and an in-memory store."""
    return AuthService(token_service=tokens, session_store=sessions, session_ttl=604800)


# ------------------------------ Register ---------------------------------- #
def test_register_normalizes_and_hashes(service, session):
    out = service.register(RegisterIn(name="  Jane Doe ", email=" Jane@Example.COM ", password="secret1!"))

    assert out.email == "jane@example.com"
    assert out.name == "Jane Doe"
    assert out.created_at is not None

    stored = session.get(User, out.id)
    assert stored.password_hash != "secret1!"
    assert stored.verify_password("secret1!")


def test_register_duplicate_email_differing_in_case(service):
    service.register(RegisterIn(name="Jane", email="jane@example.com", password="secret1!"))
    with pytest.raises(DuplicateEmailError) as exc:
        service.register(RegisterIn(name="Other", email="JANE@example.com", password="secret1!"))
    assert exc.value.status_code == 400
    assert exc.value.message == "Oops! This email is taken. Try a different email address."


def test_register_does_not_open_a_session(service, sessions):
    service.register(RegisterIn(name="Jane", email="jane@example.com", password="secret1!"))
    assert len(sessions) == 0


# -------------------------------- Login ----------------------------------- #
def test_login_issues_pair_and_stores_session(service, sessions, tokens):
    user = UserFactory(email="a@example.com")

    pair = service.login(LoginIn(email="a@example.com", password=DEFAULT_PASSWORD))

    assert sessions.get(user.id) == SessionPair(pair.access_token, pair.refresh_token)
    claims = tokens.verify(pair.access_token, TokenKind.ACCESS)
    assert (claims.user_id, claims.email) == (user.id, "a@example.com")


def test_login_normalizes_email(service):
    UserFactory(email="mixed@example.com")
    pair = service.login(LoginIn(email="  MIXED@Example.com ", password=DEFAULT_PASSWORD))
    assert pair.access_token


@pytest.mark.parametrize(
    "email,password",
    [("a@example.com", "wrong-password"), ("missing@example.com", DEFAULT_PASSWORD)],
)
def test_login_failures_share_one_message(service, email, password):
    UserFactory(email="a@example.com")
    with pytest.raises(InvalidCredentialsError) as exc:
        service.login(LoginIn(email=email, password=password))
    assert exc.value.status_code == 401
    assert exc.value.message == "Invalid email or password"


def test_second_login_replaces_session(service, sessions):
    user = UserFactory()
    first = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    second = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))

    stored = sessions.get(user.id)
    assert stored.refresh_token == second.refresh_token
    assert stored.refresh_token != first.refresh_token


# ------------------------------- Refresh ---------------------------------- #
def test_refresh_rotates_access_and_keeps_refresh(service, sessions):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))

    out = service.refresh(RefreshIn(refresh_token=pair.refresh_token))

    assert out.access_token != pair.access_token
    assert sessions.get(user.id) == SessionPair(out.access_token, pair.refresh_token)


@pytest.mark.parametrize("value", [None, "", "   "])
def test_refresh_requires_token(service, value):
    with pytest.raises(MissingInputError):
        service.refresh(RefreshIn(refresh_token=value))


def test_refresh_rejects_access_token(service):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    with pytest.raises(InvalidRefreshTokenError) as exc:
        service.refresh(RefreshIn(refresh_token=pair.access_token))
    assert exc.value.status_code == 401


def test_refresh_rejects_expired_token(service, clock):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    clock.advance(604800)
    with pytest.raises(InvalidRefreshTokenError):
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))


def test_refresh_after_logout_has_no_session(service):
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    service.logout(user.id)
    with pytest.raises(SessionNotFoundError):
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))


def test_refresh_with_superseded_token_mismatches(service):
    user = UserFactory()
    old = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    with pytest.raises(TokenMismatchError):
        service.refresh(RefreshIn(refresh_token=old.refresh_token))


def test_concurrent_refreshes_with_same_token_let_exactly_one_win(service, sessions, monkeypatch):
    """Refresh B lands between refresh A's session read and A's swap."""
    user = UserFactory()
    pair = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
    original_get = sessions.get
    results = {}

    def get_then_interleave(user_id):
        current = original_get(user_id)
        if "b" not in results:
            results["b"] = None
            results["b"] = service.refresh(RefreshIn(refresh_token=pair.refresh_token))
        return current

    monkeypatch.setattr(sessions, "get", get_then_interleave)

    with pytest.raises(TokenMismatchError):
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))

    monkeypatch.setattr(sessions, "get", original_get)
    winner = results["b"]
    assert winner.access_token != pair.access_token
    assert sessions.get(user.id) == SessionPair(winner.access_token, pair.refresh_token)


# -------------------------------- Logout ---------------------------------- #
def test_logout_is_idempotent(service, sessions):
    user = UserFactory()
    service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))

    service.logout(user.id)
    service.logout(user.id)
    assert sessions.get(user.id) is None
