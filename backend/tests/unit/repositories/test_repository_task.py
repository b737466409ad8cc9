"""Unit tests for TaskRepository."""

import pytest

from taskmanager.repositories.base import Pagination, parse_sort_tokens
from taskmanager.repositories.task import TaskRepository
from tests.factories.task import TaskFactory
from tests.factories.user import UserFactory


class TestTaskRepository:
    @pytest.fixture()
    def repo(self, app):
        return TaskRepository()

    @pytest.fixture()
    def owner(self, app):
        return UserFactory()

    def test_paginate_for_owner_scopes_rows(self, repo, owner):
        mine = TaskFactory.create_batch(3, owner=owner)
        TaskFactory.create_batch(2)

        page = repo.paginate_for_owner(owner.id, Pagination(page=1, limit=10, sort=["-created_at"]))

        assert page.total == 3
        assert [t.id for t in page.items] == [t.id for t in reversed(mine)]

    def test_filters_combine(self, repo, owner):
        TaskFactory(owner=owner, priority="high", status="completed")
        TaskFactory(owner=owner, priority="high", status="pending")
        TaskFactory(owner=owner, priority="low", status="completed")

        page = repo.paginate_for_owner(
            owner.id, Pagination(page=1, limit=10, sort=[]), priority="high", status="completed"
        )
        assert page.total == 1

    def test_offset_beyond_last_page_is_empty(self, repo, owner):
        TaskFactory.create_batch(3, owner=owner)
        page = repo.paginate_for_owner(owner.id, Pagination(page=2, limit=10, sort=[]))
        assert page.items == []
        assert page.total == 3

    def test_assign_updates_rejects_unknown_fields(self, repo, owner):
        task = TaskFactory(owner=owner)
        with pytest.raises(ValueError, match="owner_id"):
            repo.assign_updates(task, {"owner_id": 999})

    def test_assign_updates_runs_model_validators(self, repo, owner):
        task = TaskFactory(owner=owner)
        repo.assign_updates(task, {"priority": "HIGH"})
        assert task.priority == "high"


def test_parse_sort_tokens():
    assert parse_sort_tokens(["-created_at", "title", "-", ""]) == [
        ("created_at", True),
        ("title", False),
    ]
