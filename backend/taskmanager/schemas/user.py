"""User listing schemas."""

from __future__ import annotations

from marshmallow import fields

from taskmanager.schemas.auth import UserPublicSchema
from taskmanager.schemas.common import BaseSchema, PaginationSchema


class UserListSchema(BaseSchema):
    users = fields.List(fields.Nested(UserPublicSchema))
    pagination = fields.Nested(PaginationSchema)
