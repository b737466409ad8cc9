"""Task CRUD endpoints scoped to the authenticated caller."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, request

from taskmanager.api.deps import (
    current_actor,
    json_body,
    require_auth,
    success_response,
    task_service,
    timing,
)
from taskmanager.schemas import (
    TaskCreateSchema,
    TaskListSchema,
    TaskQuerySchema,
    TaskSchema,
    TaskUpdateSchema,
)
from taskmanager.services.tasks.dto import TaskCreateIn, TaskListQuery, TaskUpdateIn

bp = Blueprint("tasks", __name__)

create_schema = TaskCreateSchema()
update_schema = TaskUpdateSchema()
query_schema = TaskQuerySchema()
task_schema = TaskSchema()
task_list_schema = TaskListSchema()


@bp.post("")
@require_auth
@timing
def create_task():
    data = create_schema.load(json_body())
    data.pop("status", None)
    task = task_service().create(current_actor(), TaskCreateIn(**data))
    return success_response(
        task_schema.dump(task), "New Task created successfully!", status=HTTPStatus.CREATED
    )


@bp.get("")
@require_auth
@timing
def list_tasks():
    """List the caller's tasks with ``page``/``limit``/``priority``/``status``."""
    query = query_schema.load(request.args)
    result = task_service().list(current_actor(), TaskListQuery(**query))
    return success_response(task_list_schema.dump(result), "Tasks retrieved successfully")


@bp.get("/<int:task_id>")
@require_auth
@timing
def get_task(task_id: int):
    task = task_service().get(current_actor(), task_id)
    return success_response(task_schema.dump(task), "Single Task retrieved successfully!")


@bp.put("/<int:task_id>")
@require_auth
@timing
def update_task(task_id: int):
    changes = update_schema.load(json_body())
    task = task_service().update(current_actor(), task_id, TaskUpdateIn(changes=changes))
    return success_response(task_schema.dump(task), "Single Task updated successfully!")


@bp.delete("/<int:task_id>")
@require_auth
@timing
def delete_task(task_id: int):
    task_service().delete(current_actor(), task_id)
    return success_response(None, "Single Task deleted successfully!")
