"""Task repository scoped to owner queries."""

from __future__ import annotations

from taskmanager.models.task import Task
from taskmanager.repositories.base import BaseRepository, Page, Pagination


class TaskRepository(BaseRepository[Task]):
    """Persistence-only repository for :class:`Task`."""

    model = Task

    def _sortable_fields(self):
        return {
            "created_at": Task.created_at,
            "due_date": Task.due_date,
            "priority": Task.priority,
            "title": Task.title,
        }

    def _filterable_fields(self):
        return {
            "owner_id": Task.owner_id,
            "priority": Task.priority,
            "status": Task.status,
        }

    def _updatable_fields(self):
        return {"title", "description", "due_date", "priority", "status"}

    def paginate_for_owner(
        self,
        owner_id: int,
        pagination: Pagination,
        *,
        priority: str | None = None,
        status: str | None = None,
    ) -> Page[Task]:
        """List one owner's tasks with optional exact-match filters."""
        filters = {"owner_id": owner_id, "priority": priority, "status": status}
        return self.paginate(pagination, filters=filters)
