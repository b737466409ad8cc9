"""Generic repository base and query utilities for SQLAlchemy 2.x.

Persistence-only concerns shared by all repositories:

- Safe sorting with a whitelist mapping and a primary-key tiebreaker.
- Offset pagination with a total count.
- Equality filters and update assignments restricted to whitelists.
- No commit/rollback: services own transactions through the Unit of Work.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from taskmanager.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


# ------------------------------- Pagination ----------------------------------


@dataclass(slots=True)
class Pagination:
    """Pagination input parameters.

    :param page: 1-based page number.
    :type page: int
    :param limit: Page size.
    :type limit: int
    :param sort: Public sort tokens (e.g., ``["-created_at"]``).
    :type sort: list[str]
    """

    page: int
    limit: int
    sort: list[str]


@dataclass(slots=True)
class Page(Generic[E]):
    """Result page with metadata."""

    items: Sequence[E]
    total: int
    page: int
    limit: int


# ----------------------------- Sorting utilities -----------------------------


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse public sort tokens into ``(field, is_desc)`` tuples.

    :param raw: Public tokens like ``["-created_at", "title"]``.
    :returns: List of ``(field_name, is_desc)`` tokens.
    :rtype: list[tuple[str, bool]]
    """
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = (token[1:] if is_desc else token).strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply safe ``ORDER BY`` clauses based on a whitelist mapping.

    Unknown sort tokens are ignored. The primary key is appended as a final
    tiebreaker in the direction of the last applied token, so rows created in
    the same instant keep a stable order across pages.
    """
    orders: list[Any] = []
    last_desc = False
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())
            last_desc = is_desc

    if orders:
        stmt = stmt.order_by(*orders)

    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.desc() if last_desc else pk_attr.asc())

    return stmt


# --------------------------- Pagination execution ----------------------------


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page: int,
    limit: int,
) -> tuple[list[Any], int]:
    """Execute a select with offset pagination and a total count.

    The statement's ``ORDER BY`` is stripped for the ``COUNT``.

    :returns: Tuple of ``(items, total)``.
    :rtype: tuple[list[Any], int]
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = int(session.execute(count_stmt).scalar_one())

    sliced = stmt.limit(limit).offset((page - 1) * limit)
    items = list(session.execute(sliced).scalars().all())
    return items, total


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model`` and MAY override the whitelist hooks
    ``_sortable_fields``, ``_filterable_fields`` and ``_updatable_fields``.
    This class never opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    # ------------------------------ Internals --------------------------------

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        """Apply equality filters for whitelisted keys; others are ignored."""
        if not filters:
            return stmt
        allowed = self._filterable_fields()
        clauses: list[Any] = []
        for k, v in filters.items():
            col = allowed.get(k)
            if isinstance(col, InstrumentedAttribute) and v is not None:
                clauses.append(col == v)
        return stmt.where(and_(*clauses)) if clauses else stmt

    def _sanitize_update_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Return only whitelisted update keys.

        :raises ValueError: If unknown keys are present.
        """
        allowed = self._updatable_fields()
        unknown = [k for k in fields if k not in allowed]
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return dict(fields)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush to materialize the PK."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key."""
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        result = self.session.execute(select(self.model).where(pk_attr == entity_id))
        return cast(E | None, result.scalars().first())

    def exists(self, **filters: Any) -> bool:
        """Check existence for whitelisted equality filters."""
        stmt: Select[Any] = select(func.count()).select_from(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        return bool(self.session.execute(stmt).scalar())

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    def assign_updates(self, instance: E, fields: Mapping[str, Any]) -> E:
        """Assign whitelisted keys to ``instance`` and flush.

        ``setattr`` is used so model ``@validates`` hooks run.
        """
        for k, v in self._sanitize_update_fields(fields).items():
            setattr(instance, k, v)
        self.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def paginate(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
    ) -> Page[E]:
        """Paginate entities with whitelisted filters and stable sorting."""
        stmt: Select[Any] = select(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        stmt = apply_sorting(
            stmt, self._sortable_fields(), pagination.sort, pk_attr=self._pk_attr()
        )
        raw_items, total = paginate_select(
            self.session, stmt, page=pagination.page, limit=pagination.limit
        )
        return Page(
            items=cast(list[E], raw_items),
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )
