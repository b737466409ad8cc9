"""Model-level tests for :class:`User`."""

import pytest
from sqlalchemy.exc import IntegrityError

from taskmanager.models import User
from tests.factories.user import UserFactory


def test_email_is_normalized_on_assignment(app):
    user = User(name="  Jane ", email="  Jane@Example.COM ")
    assert user.email == "jane@example.com"
    assert user.name == "Jane"


@pytest.mark.parametrize("email", ["", "no-at-sign", "a@nodot"])
def test_invalid_email_rejected(app, email):
    with pytest.raises(ValueError):
        User(name="Jane", email=email)


def test_password_is_write_only(app):
    user = User(name="Jane", email="jane@example.com")
    user.password = "secret1!"

    assert user.password_hash != "secret1!"
    assert user.verify_password("secret1!")
    assert not user.verify_password("other")
    with pytest.raises(AttributeError):
        _ = user.password


def test_empty_password_rejected(app):
    user = User(name="Jane", email="jane@example.com")
    with pytest.raises(ValueError):
        user.password = ""


def test_email_unique_constraint(app, session):
    UserFactory(email="dup@example.com")
    session.add(User(name="Other", email="dup@example.com", password_hash="x"))
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()


def test_timestamps_are_set(app):
    user = UserFactory()
    assert user.created_at is not None
    assert user.updated_at is not None
