"""Page/limit normalisation and the paged result shape used by history queries."""

import math
from dataclasses import dataclass
from typing import Any

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Page:
    items: list[Any]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


def normalize_pagination(page=None, limit=None) -> PageRequest:
    """Clamp ``page`` to at least 1 and ``limit`` to ``[1, MAX_LIMIT]``; missing values take defaults."""
    page = DEFAULT_PAGE if page is None else int(page)
    limit = DEFAULT_LIMIT if limit is None else int(limit)
    return PageRequest(page=max(page, 1), limit=min(max(limit, 1), MAX_LIMIT))


def build_page(items, total: int, request: PageRequest) -> Page:
    total_pages = math.ceil(total / request.limit) or 1
    return Page(
        items=list(items),
        total=total,
        page=request.page,
        limit=request.limit,
        total_pages=total_pages,
        has_next_page=request.page < total_pages,
        has_previous_page=request.page > 1,
    )
