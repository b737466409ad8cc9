# taskmanager/services/tasks/service.py
from __future__ import annotations

import logging

from taskmanager.models.task import PRIORITY_VALUES, STATUS_VALUES, Task, TaskStatus
from taskmanager.services._shared.base import BaseService
from taskmanager.services._shared.dto import Actor, PageMeta
from taskmanager.services._shared.errors import (
    InvalidFilterError,
    NotFoundError,
    UnauthorizedError,
)
from taskmanager.services.tasks.dto import (
    OwnerOut,
    TaskCreateIn,
    TaskListOut,
    TaskListQuery,
    TaskOut,
    TaskUpdateIn,
)

log = logging.getLogger(__name__)

# Newest first; the repository appends the id as tiebreaker.
DEFAULT_SORT = ("-created_at",)


def to_out(task: Task) -> TaskOut:
    return TaskOut(
        id=task.id,
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        priority=task.priority,
        status=task.status,
        owner=OwnerOut(id=task.owner_id, name=task.owner_name, email=task.owner_email),
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def normalize_filter(name: str, value: str | None, allowed: tuple[str, ...]) -> str | None:
    """Lower-case a filter value and check it against ``allowed``.

    Blank values mean "no filter".

    :raises InvalidFilterError: When the value is outside ``allowed``.
    """
    if value is None or not value.strip():
        return None
    v = value.strip().lower()
    if v not in allowed:
        raise InvalidFilterError(name)
    return v


class TaskService(BaseService):
    """
    CRUD over tasks owned by the authenticated caller.

    Every operation takes the caller as an :class:`Actor`; ``None`` means
    the request was not authenticated and is rejected.
    """

    @staticmethod
    def _require_actor(actor: Actor | None) -> Actor:
        if actor is None:
            raise UnauthorizedError()
        return actor

    def create(self, actor: Actor | None, dto: TaskCreateIn) -> TaskOut:
        """
        Create a task owned by ``actor``; status always starts as ``pending``.

        :raises UnauthorizedError: No caller, or the caller's account is gone.
        """
        actor = self._require_actor(actor)
        with self.rw_uow() as uow:
            owner = uow.users.get(actor.user_id)
            if owner is None:
                raise UnauthorizedError()
            task = Task(
                title=dto.title,
                description=dto.description,
                due_date=dto.due_date,
                priority=dto.priority or "medium",
                status=TaskStatus.PENDING.value,
                owner_id=owner.id,
                owner_name=owner.name,
                owner_email=owner.email,
            )
            uow.tasks.add(task)
            out = to_out(task)
        log.info("tasks.create", extra={"user_id": actor.user_id, "outcome": "ok"})
        return out

    def list(self, actor: Actor | None, query: TaskListQuery) -> TaskListOut:
        """
        Page through the caller's tasks, newest first.

        :raises InvalidFilterError: ``priority`` or ``status`` not in its enum.
        """
        actor = self._require_actor(actor)
        priority = normalize_filter("priority", query.priority, PRIORITY_VALUES)
        status = normalize_filter("status", query.status, STATUS_VALUES)
        pagination = self.ensure_pagination(
            page=query.page, limit=query.limit, sort=DEFAULT_SORT
        )
        with self.ro_uow() as uow:
            page = uow.tasks.paginate_for_owner(
                actor.user_id, pagination, priority=priority, status=status
            )
            tasks = [to_out(t) for t in page.items]
        meta = PageMeta.build(total=page.total, page=page.page, limit=page.limit)
        return TaskListOut(tasks=tasks, pagination=meta)

    def get(self, actor: Actor | None, task_id: int) -> TaskOut:
        """
        :raises NotFoundError: Unknown task.
        :raises ForbiddenError: Task owned by someone else.
        """
        actor = self._require_actor(actor)
        with self.ro_uow() as uow:
            task = uow.tasks.get(task_id)
            if task is None:
                raise NotFoundError("Task", task_id)
            self.ensure_owner(actor.user_id, task.owner_id)
            return to_out(task)

    def update(self, actor: Actor | None, task_id: int, dto: TaskUpdateIn) -> TaskOut:
        """
        Merge the provided fields into the task.

        :raises NotFoundError: Unknown task.
        :raises UnauthorizedError: Task owned by someone else.
        """
        actor = self._require_actor(actor)
        with self.rw_uow() as uow:
            task = uow.tasks.get(task_id)
            if task is None:
                raise NotFoundError("Task", task_id)
            self.ensure_owner(
                actor.user_id,
                task.owner_id,
                error=UnauthorizedError,
                msg="Unauthorized to update this task",
            )
            if dto.changes:
                uow.tasks.assign_updates(task, dto.changes)
            out = to_out(task)
        log.info("tasks.update", extra={"user_id": actor.user_id, "outcome": "ok"})
        return out

    def delete(self, actor: Actor | None, task_id: int) -> None:
        """
        :raises NotFoundError: Unknown task.
        :raises UnauthorizedError: Task owned by someone else.
        """
        actor = self._require_actor(actor)
        with self.rw_uow() as uow:
            task = uow.tasks.get(task_id)
            if task is None:
                raise NotFoundError("Task", task_id)
            self.ensure_owner(
                actor.user_id,
                task.owner_id,
                error=UnauthorizedError,
                msg="Unauthorized to delete this task",
            )
            uow.tasks.delete(task)
        log.info("tasks.delete", extra={"user_id": actor.user_id, "outcome": "ok"})
