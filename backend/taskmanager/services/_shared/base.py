# taskmanager/services/_shared/base.py
from __future__ import annotations

from collections.abc import Iterable

from taskmanager.repositories.base import Pagination
from taskmanager.services._shared.errors import ForbiddenError, ServiceError
from taskmanager.services._shared.policies.common import is_owner
from taskmanager.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Offer shared validation helpers (pagination, ownership).

    Notes
    -----
    Services never touch the global session directly; they always go
    through a Unit of Work.
    """

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(
        self,
        *,
        page: int | None,
        limit: int | None,
        sort: Iterable[str] | None = None,
    ) -> Pagination:
        """
        Build a Pagination value object with defaults and clamping.

        Missing or non-positive values fall back to page 1 / limit 10, and
        ``limit`` is capped at 100.

        :param page: 1-based page number.
        :param limit: Page size.
        :param sort: Sort tokens like ``["-created_at"]``.
        :returns: Pagination instance.
        :rtype: Pagination
        """
        page = page if page and page > 0 else DEFAULT_PAGE
        limit = limit if limit and limit > 0 else DEFAULT_LIMIT
        return Pagination(page=int(page), limit=min(int(limit), MAX_LIMIT), sort=list(sort or []))

    # --------------------------- AuthZ --------------------------------

    def ensure_owner(
        self,
        actor_id: int | None,
        owner_id: int,
        *,
        error: type[ServiceError] = ForbiddenError,
        msg: str | None = None,
    ) -> None:
        """
        Ensure the current actor is the resource owner.

        :param actor_id: Authenticated user id.
        :param owner_id: Owner recorded on the resource.
        :param error: Error type raised on mismatch.
        :param msg: Optional custom error message.
        :raises ServiceError: ``error`` when the actor is not the owner.
        """
        if not is_owner(actor_id=actor_id, owner_id=owner_id):
            raise error(msg)
