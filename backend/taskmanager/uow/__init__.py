"""Unit of Work contract and its SQLAlchemy implementations."""

from .base import UnitOfWork
from .sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = ["UnitOfWork", "SQLAlchemyUnitOfWork", "SQLAlchemyReadOnlyUnitOfWork"]
