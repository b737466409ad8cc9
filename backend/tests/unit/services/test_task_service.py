# tests/unit/services/test_task_service.py
from __future__ import annotations

from datetime import UTC, datetime

import pytest

from taskmanager.models import Task
from taskmanager.services._shared.dto import Actor
from taskmanager.services._shared.errors import (
    ForbiddenError,
    InvalidFilterError,
    NotFoundError,
    UnauthorizedError,
)
from taskmanager.services.tasks.dto import TaskCreateIn, TaskListQuery, TaskUpdateIn
from taskmanager.services.tasks.service import TaskService, normalize_filter
from tests.factories.task import TaskFactory
from tests.factories.user import UserFactory

DUE = datetime(2024, 12, 20, tzinfo=UTC)


@pytest.fixture()
def service(app) -> TaskService:
    return TaskService()


@pytest.fixture()
def owner():
    return UserFactory(name="Owner One", email="owner@example.com")


@pytest.fixture()
def actor(owner) -> Actor:
    return Actor(user_id=owner.id, email=owner.email)


# -------------------------------- Create ---------------------------------- #
def test_create_snapshots_owner_and_starts_pending(service, actor, owner, session):
    out = service.create(actor, TaskCreateIn(title="Write report", description="Q4", due_date=DUE))

    assert out.status == "pending"
    assert out.priority == "medium"
    assert out.owner.id == owner.id
    assert out.owner.name == "Owner One"
    assert out.owner.email == "owner@example.com"
    assert session.get(Task, out.id) is not None


def test_create_keeps_requested_priority(service, actor):
    out = service.create(
        actor, TaskCreateIn(title="t", description="d", due_date=DUE, priority="high")
    )
    assert out.priority == "high"


def test_create_requires_actor(service):
    with pytest.raises(UnauthorizedError):
        service.create(None, TaskCreateIn(title="t", description="d", due_date=DUE))


def test_create_for_deleted_account_is_unauthorized(service):
    with pytest.raises(UnauthorizedError):
        service.create(
            Actor(user_id=999, email="ghost@example.com"),
            TaskCreateIn(title="t", description="d", due_date=DUE),
        )


# --------------------------------- List ----------------------------------- #
def test_list_only_returns_callers_tasks_newest_first(service, actor, owner):
    first = TaskFactory(owner=owner, title="first")
    second = TaskFactory(owner=owner, title="second")
    TaskFactory(title="someone else's")

    result = service.list(actor, TaskListQuery())

    assert [t.id for t in result.tasks] == [second.id, first.id]
    assert result.pagination.total == 2
    assert result.pagination.total_pages == 1
    assert (result.pagination.page, result.pagination.limit) == (1, 10)


def test_list_pages_are_disjoint(service, actor, owner):
    for i in range(25):
        TaskFactory(owner=owner, title=f"t{i}")

    seen: list[int] = []
    for page in (1, 2, 3):
        result = service.list(actor, TaskListQuery(page=page, limit=10))
        seen.extend(t.id for t in result.tasks)
        assert result.pagination.total_pages == 3

    assert len(seen) == 25
    assert len(set(seen)) == 25
    assert service.list(actor, TaskListQuery(page=4, limit=10)).tasks == []


def test_list_filters_case_insensitively(service, actor, owner):
    TaskFactory(owner=owner, priority="high", status="pending")
    TaskFactory(owner=owner, priority="high", status="completed")
    TaskFactory(owner=owner, priority="low", status="pending")

    result = service.list(actor, TaskListQuery(priority="HIGH", status="Pending"))
    assert result.pagination.total == 1
    assert result.tasks[0].priority == "high"
    assert result.tasks[0].status == "pending"


def test_list_rejects_unknown_filter_value(service, actor):
    with pytest.raises(InvalidFilterError) as exc:
        service.list(actor, TaskListQuery(priority="urgent"))
    assert exc.value.message == "Invalid priority"


def test_list_clamps_pagination(service, actor, owner):
    TaskFactory(owner=owner)
    result = service.list(actor, TaskListQuery(page=0, limit=500))
    assert (result.pagination.page, result.pagination.limit) == (1, 100)


def test_list_empty(service, actor):
    result = service.list(actor, TaskListQuery())
    assert result.tasks == []
    assert result.pagination.total == 0
    assert result.pagination.total_pages == 0


@pytest.mark.parametrize("value,expected", [(None, None), ("  ", None), (" Low ", "low")])
def test_normalize_filter(value, expected):
    assert normalize_filter("priority", value, ("low", "medium", "high")) == expected


# ---------------------------------- Get ----------------------------------- #
def test_get_own_task(service, actor, owner):
    task = TaskFactory(owner=owner)
    assert service.get(actor, task.id).id == task.id


def test_get_foreign_task_is_forbidden(service, actor):
    task = TaskFactory()
    with pytest.raises(ForbiddenError):
        service.get(actor, task.id)


def test_get_missing_task(service, actor):
    with pytest.raises(NotFoundError) as exc:
        service.get(actor, 12345)
    assert exc.value.message == "Task not found"


# -------------------------------- Update ---------------------------------- #
def test_update_merges_fields(service, actor, owner, session):
    task = TaskFactory(owner=owner, title="old", priority="low")

    out = service.update(actor, task.id, TaskUpdateIn(changes={"status": "completed"}))

    assert out.status == "completed"
    assert out.title == "old"
    assert out.priority == "low"
    assert out.owner.id == owner.id
    assert session.get(Task, task.id).status == "completed"


def test_update_with_no_changes_returns_task(service, actor, owner):
    task = TaskFactory(owner=owner, title="same")
    assert service.update(actor, task.id, TaskUpdateIn()).title == "same"


def test_update_foreign_task_is_unauthorized(service, actor, session):
    task = TaskFactory(title="theirs")
    with pytest.raises(UnauthorizedError) as exc:
        service.update(actor, task.id, TaskUpdateIn(changes={"title": "mine"}))
    assert exc.value.status_code == 401
    assert exc.value.message == "Unauthorized to update this task"
    assert session.get(Task, task.id).title == "theirs"


def test_update_missing_task(service, actor):
    with pytest.raises(NotFoundError):
        service.update(actor, 999, TaskUpdateIn(changes={"title": "x"}))


# -------------------------------- Delete ---------------------------------- #
def test_delete_own_task(service, actor, owner, session):
    task = TaskFactory(owner=owner)
    service.delete(actor, task.id)
    assert session.get(Task, task.id) is None


def test_delete_foreign_task_is_unauthorized(service, actor, session):
    task = TaskFactory()
    with pytest.raises(UnauthorizedError) as exc:
        service.delete(actor, task.id)
    assert exc.value.message == "Unauthorized to delete this task"
    assert session.get(Task, task.id) is not None


def test_delete_twice_reports_not_found(service, actor, owner):
    task = TaskFactory(owner=owner)
    service.delete(actor, task.id)
    with pytest.raises(NotFoundError):
        service.delete(actor, task.id)
