"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from contextlib import suppress

from sqlalchemy import event
from sqlalchemy.orm import Session

from taskmanager.core.extensions import db
from taskmanager.repositories import TaskRepository, UserRepository
from taskmanager.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.tasks = TaskRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write UoW using the Flask-scoped session.

    Commits on a clean exit and rolls back when the block raises.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session begins lazily on first use.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only UoW backed by the Flask-scoped session.

    A ``before_flush`` guard rejects any pending ORM change while the scope
    is open, and the transaction is rolled back on exit. ``commit()`` is not
    allowed. The guard is bound to the thread-local
    ``Session`` instance rather than the scoped proxy so it never affects
    other threads.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session())
        self._guard_installed = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        event.listen(self.session, "before_flush", self._before_flush)
        self._guard_installed = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            if self._guard_installed:
                with suppress(Exception):
                    event.remove(self.session, "before_flush", self._before_flush)
                self._guard_installed = False

    @staticmethod
    def _before_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()
