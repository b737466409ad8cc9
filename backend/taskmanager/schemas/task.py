"""Task Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import fields, pre_load, validate

from taskmanager.models.task import PRIORITY_VALUES, STATUS_VALUES
from taskmanager.schemas.common import BaseSchema, PaginationSchema, TrimmedSchema, UTCDateTime

PRIORITY_CHOICE = validate.OneOf(PRIORITY_VALUES, error="Must be one of: low, medium, high.")
STATUS_CHOICE = validate.OneOf(STATUS_VALUES, error="Must be one of: pending, completed.")


class _TaskWriteSchema(TrimmedSchema):
    """Lower-cases enum inputs so ``High`` and ``high`` are equivalent."""

    TRIM_FIELDS = ("title", "description", "priority", "status")

    @pre_load
    def _lower_enums(self, data: Any, **kwargs: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            k: v.lower() if k in ("priority", "status") and isinstance(v, str) else v
            for k, v in data.items()
        }


class TaskCreateSchema(_TaskWriteSchema):
    """Input payload for ``POST /tasks``.

    ``status`` is accepted for compatibility but new tasks always start as
    ``pending``.
    """

    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(required=True, validate=validate.Length(min=1))
    due_date = UTCDateTime(data_key="dueDate", required=True)
    priority = fields.String(load_default="medium", validate=PRIORITY_CHOICE)
    status = fields.String(load_default=None, validate=STATUS_CHOICE)


class TaskUpdateSchema(_TaskWriteSchema):
    """Partial update payload for ``PUT /tasks/<id>``."""

    title = fields.String(validate=validate.Length(min=1, max=200))
    description = fields.String(validate=validate.Length(min=1))
    due_date = UTCDateTime(data_key="dueDate")
    priority = fields.String(validate=PRIORITY_CHOICE)
    status = fields.String(validate=STATUS_CHOICE)


class TaskQuerySchema(BaseSchema):
    """Query string of ``GET /tasks``; enum values are checked by the service."""

    page = fields.Integer(load_default=None)
    limit = fields.Integer(load_default=None)
    priority = fields.String(load_default=None)
    status = fields.String(load_default=None)


class OwnerSchema(BaseSchema):
    id = fields.Integer()
    name = fields.String()
    email = fields.Email()


class TaskSchema(BaseSchema):
    """Serialize task DTOs."""

    id = fields.Integer()
    title = fields.String()
    description = fields.String()
    due_date = UTCDateTime(data_key="dueDate")
    priority = fields.String()
    status = fields.String()
    owner = fields.Nested(OwnerSchema)
    created_at = UTCDateTime(data_key="createdAt")
    updated_at = UTCDateTime(data_key="updatedAt")


class TaskListSchema(BaseSchema):
    tasks = fields.List(fields.Nested(TaskSchema))
    pagination = fields.Nested(PaginationSchema)
