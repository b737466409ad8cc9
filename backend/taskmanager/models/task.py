"""Task model with a denormalized owner snapshot."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from taskmanager.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


PRIORITY_VALUES = tuple(p.value for p in TaskPriority)
STATUS_VALUES = tuple(s.value for s in TaskStatus)


class Task(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A to-do item owned by a single user.

    The owner is stored as a snapshot (``owner_id``, ``owner_name``,
    ``owner_email``) taken from the authenticated caller at creation. It is
    not a foreign key and is never reassigned.
    """

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    priority: Mapped[str] = mapped_column(
        String(10), nullable=False, default=TaskPriority.MEDIUM.value
    )
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=TaskStatus.PENDING.value
    )

    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    owner_name: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_email: Mapped[str] = mapped_column(String(254), nullable=False)

    __table_args__ = (
        CheckConstraint("priority IN ('low', 'medium', 'high')", name="priority_enum"),
        CheckConstraint("status IN ('pending', 'completed')", name="status_enum"),
        Index("ix_tasks_owner_created", "owner_id", "created_at"),
    )

    @validates("priority")
    def _normalize_priority(self, key: str, value: str) -> str:
        v = str(value).strip().lower()
        if v not in PRIORITY_VALUES:
            raise ValueError(f"priority must be one of {PRIORITY_VALUES}")
        return v

    @validates("status")
    def _normalize_status(self, key: str, value: str) -> str:
        v = str(value).strip().lower()
        if v not in STATUS_VALUES:
            raise ValueError(f"status must be one of {STATUS_VALUES}")
        return v
