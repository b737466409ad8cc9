"""User listing and self-profile endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from taskmanager.api.deps import current_actor, require_auth, success_response, timing, user_service
from taskmanager.schemas import PageQuerySchema, UserListSchema, UserPublicSchema

bp = Blueprint("users", __name__)

page_schema = PageQuerySchema()
user_schema = UserPublicSchema()
user_list_schema = UserListSchema()


@bp.get("")
@require_auth
@timing
def list_users():
    query = page_schema.load(request.args)
    result = user_service().list_users(current_actor(), **query)
    return success_response(user_list_schema.dump(result), "Users retrieved successfully")


@bp.get("/<int:user_id>")
@require_auth
@timing
def get_user(user_id: int):
    """Return the caller's own profile; other ids are refused with 403."""
    user = user_service().get_user(current_actor(), user_id)
    return success_response(user_schema.dump(user), "User details retrieved")
