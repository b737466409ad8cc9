"""Shared Marshmallow building blocks."""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from typing import Any, ClassVar

from marshmallow import Schema, ValidationError, fields, pre_load


class BaseSchema(Schema):
    """Base schema enabling ordered output for consistent API responses."""

    class Meta:
        ordered = True


class TrimmedSchema(BaseSchema):
    """Strip surrounding whitespace from the ``TRIM_FIELDS`` values before loading."""

    TRIM_FIELDS: ClassVar[tuple[str, ...]] = ()

    @pre_load
    def _strip_strings(self, data: Any, **kwargs: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            k: v.strip() if k in self.TRIM_FIELDS and isinstance(v, str) else v
            for k, v in data.items()
        }


class UTCDateTime(fields.DateTime):
    """ISO-8601 datetime normalized to UTC.

    Naive values are taken as UTC on both load and dump, so rows read back
    from databases without timezone support serialize like fresh ones. On
    load a plain date (``2024-12-20``) is accepted as midnight UTC.
    """

    def _serialize(self, value: datetime | None, attr: str | None, obj: Any, **kwargs: Any):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).isoformat()

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> datetime:
        try:
            parsed = super()._deserialize(value, attr, data, **kwargs)
        except ValidationError:
            if not isinstance(value, str):
                raise
            try:
                parsed = datetime.combine(date.fromisoformat(value), time.min)
            except ValueError:
                raise self.make_error("invalid", input=value, obj_type=self.OBJ_TYPE) from None
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)


class PaginationSchema(BaseSchema):
    """Pagination metadata attached to list responses."""

    total = fields.Integer()
    page = fields.Integer()
    limit = fields.Integer()
    total_pages = fields.Integer(data_key="totalPages")


class PageQuerySchema(BaseSchema):
    """``page``/``limit`` query parameters; clamping happens in the services."""

    page = fields.Integer(load_default=None)
    limit = fields.Integer(load_default=None)
