from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_args(cls, page, limit) -> "PageRequest":
        """Lenient parsing of query-string values: bad input falls back to defaults."""
        try:
            limit_i = int(limit) if limit not in (None, "") else DEFAULT_PAGE_LIMIT
        except (TypeError, ValueError):
            limit_i = DEFAULT_PAGE_LIMIT
        try:
            page_i = int(page) if page not in (None, "") else 1
        except (TypeError, ValueError):
            page_i = 1
        return cls(page=max(page_i, 1), limit=min(max(limit_i, 1), MAX_PAGE_LIMIT))


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def meta(self) -> dict:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
        }
