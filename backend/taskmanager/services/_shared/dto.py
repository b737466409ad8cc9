# comments in English; reST docstrings strict
from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Actor:
    """
    Authenticated caller as attached by the access gate.

    :param user_id: Numeric user id from the access token.
    :type user_id: int
    :param email: Email carried by the access token.
    :type email: str
    """

    user_id: int
    email: str


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Output pagination metadata.

    :param total: Total rows matching the query.
    :param page: Current page (1-based).
    :param limit: Page size.
    :param total_pages: ``ceil(total / limit)``.
    """

    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, *, total: int, page: int, limit: int) -> PageMeta:
        return cls(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit))
