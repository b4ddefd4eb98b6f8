# backend/tmsdb/pagination.py

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Query

DEFAULT_PAGE_SIZE = 10
_MAX_PAGE_SIZE = 100  # hard ceiling for list endpoints to protect DB


@dataclass
class Page:
    items: List[Any]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    def envelope(self, data: Optional[Sequence[Any]] = None, *, total_key: str = "total_count") -> dict:
        """
        Build the keyword arguments for a PaginatedResponse / PagedList.

        `data` replaces the raw rows when the caller has already projected
        them to response schemas.
        """
        return {
            "data": list(self.items if data is None else data),
            total_key: self.total,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "has_next_page": self.has_next_page,
            "has_previous_page": self.has_previous_page,
        }


def normalize_pagination(page: int, page_size: int) -> Tuple[int, int]:
    """
    Clamp pagination parameters to safe bounds.
    """
    if page < 1:
        page = 1
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    if page_size > _MAX_PAGE_SIZE:
        page_size = _MAX_PAGE_SIZE
    return page, page_size


def paginate(query: Query, page: int, page_size: int) -> Page:
    """
    Count the (already filtered and ordered) query, then slice one page.
    """
    page, page_size = normalize_pagination(page, page_size)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()
    return Page(items=items, total=total, page=page, page_size=page_size)


def search_filter(term: Optional[str], *columns):
    """
    Case-insensitive substring match of `term` against any of `columns`.

    Returns None for a blank term so callers can skip the filter.
    """
    if term is None or not term.strip():
        return None
    pattern = f"%{term.strip()}%"
    return or_(*[column.ilike(pattern) for column in columns])
