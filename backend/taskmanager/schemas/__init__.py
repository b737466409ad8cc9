from taskmanager.schemas.auth import (
    AccessTokenSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenPairSchema,
    UserPublicSchema,
)
from taskmanager.schemas.common import PageQuerySchema, PaginationSchema
from taskmanager.schemas.task import (
    TaskCreateSchema,
    TaskListSchema,
    TaskQuerySchema,
    TaskSchema,
    TaskUpdateSchema,
)
from taskmanager.schemas.user import UserListSchema

__all__ = [
    "AccessTokenSchema",
    "LoginSchema",
    "PageQuerySchema",
    "PaginationSchema",
    "RefreshTokenSchema",
    "RegisterSchema",
    "TaskCreateSchema",
    "TaskListSchema",
    "TaskQuerySchema",
    "TaskSchema",
    "TaskUpdateSchema",
    "TokenPairSchema",
    "UserListSchema",
    "UserPublicSchema",
]
