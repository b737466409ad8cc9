# tests/unit/services/test_user_service.py
from __future__ import annotations

import pytest

from taskmanager.services._shared.dto import Actor
from taskmanager.services._shared.errors import ForbiddenError, NotFoundError, UnauthorizedError
from taskmanager.services.users.service import PROFILE_FORBIDDEN, UserService
from tests.factories.user import UserFactory


@pytest.fixture()
def service(app) -> UserService:
    return UserService()


def test_list_users_oldest_first(service):
    users = UserFactory.create_batch(3)
    actor = Actor(user_id=users[0].id, email=users[0].email)

    result = service.list_users(actor)

    assert [u.id for u in result.users] == [u.id for u in users]
    assert result.pagination.total == 3


def test_list_users_paginates(service):
    users = UserFactory.create_batch(5)
    actor = Actor(user_id=users[0].id, email=users[0].email)

    result = service.list_users(actor, page=2, limit=2)

    assert [u.id for u in result.users] == [users[2].id, users[3].id]
    assert result.pagination.total_pages == 3


def test_list_users_requires_actor(service):
    with pytest.raises(UnauthorizedError):
        service.list_users(None)


def test_get_own_profile(service):
    user = UserFactory(name="Jane Doe")
    out = service.get_user(Actor(user_id=user.id, email=user.email), user.id)
    assert out.name == "Jane Doe"
    assert not hasattr(out, "password_hash")


def test_get_other_profile_is_forbidden(service):
    me, other = UserFactory.create_batch(2)
    with pytest.raises(ForbiddenError) as exc:
        service.get_user(Actor(user_id=me.id, email=me.email), other.id)
    assert exc.value.message == PROFILE_FORBIDDEN


def test_get_deleted_own_profile_is_not_found(service):
    with pytest.raises(NotFoundError) as exc:
        service.get_user(Actor(user_id=77, email="gone@example.com"), 77)
    assert exc.value.message == "User not found"
