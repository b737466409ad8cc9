# taskmanager/services/tasks/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from taskmanager.services._shared.dto import PageMeta

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TaskCreateIn:
    """
    Input DTO for task creation.

    :param title: Task title.
    :param description: Free-text description.
    :param due_date: Due date and time.
    :param priority: ``low``/``medium``/``high``; defaults to ``medium``.
    """

    title: str
    description: str
    due_date: datetime
    priority: str = "medium"


@dataclass(frozen=True, slots=True)
class TaskUpdateIn:
    """
    Partial update. Only keys present in ``changes`` are applied.

    :param changes: Mapping of model field names (``title``, ``description``,
        ``due_date``, ``priority``, ``status``) to new values.
    """

    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TaskListQuery:
    page: int | None = None
    limit: int | None = None
    priority: str | None = None
    status: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class OwnerOut:
    id: int
    name: str
    email: str


@dataclass(frozen=True, slots=True)
class TaskOut:
    id: int
    title: str
    description: str
    due_date: datetime
    priority: str
    status: str
    owner: OwnerOut
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class TaskListOut:
    tasks: list[TaskOut]
    pagination: PageMeta
