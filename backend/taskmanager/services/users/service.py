# taskmanager/services/users/service.py
from __future__ import annotations

from taskmanager.services._shared.base import BaseService
from taskmanager.services._shared.dto import Actor, PageMeta
from taskmanager.services._shared.errors import ForbiddenError, NotFoundError, UnauthorizedError
from taskmanager.services.auth.dto import UserPublicOut
from taskmanager.services.auth.service import to_public
from taskmanager.services.users.dto import UserListOut

PROFILE_FORBIDDEN = "Access denied. You can only view your own profile."


class UserService(BaseService):
    """Read-only access to user public projections."""

    def list_users(
        self, actor: Actor | None, *, page: int | None = None, limit: int | None = None
    ) -> UserListOut:
        """Page through all users, oldest first."""
        if actor is None:
            raise UnauthorizedError()
        pagination = self.ensure_pagination(page=page, limit=limit, sort=["created_at"])
        with self.ro_uow() as uow:
            result = uow.users.paginate(pagination)
            users = [to_public(u) for u in result.items]
        meta = PageMeta.build(total=result.total, page=result.page, limit=result.limit)
        return UserListOut(users=users, pagination=meta)

    def get_user(self, actor: Actor | None, user_id: int) -> UserPublicOut:
        """
        Return the caller's own profile.

        :raises ForbiddenError: ``user_id`` is not the caller.
        :raises NotFoundError: The caller's account no longer exists.
        """
        if actor is None:
            raise UnauthorizedError()
        if actor.user_id != user_id:
            raise ForbiddenError(PROFILE_FORBIDDEN)
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return to_public(user)
