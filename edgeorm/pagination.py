"""Offset-based and cursor-based pagination."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Generic, Iterable, Iterator, TypeVar

from edgeorm.errors import PaginationError

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_PER_PAGE = 20


@dataclass
class Pagination:
    """Page number (1-based) and page size, plus totals once they are known."""

    page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    total: int | None = None
    total_pages: int | None = None

    def _require_valid_page(self) -> None:
        if self.page < 1:
            raise PaginationError(f"page must be at least 1, got {self.page}")

    def offset(self) -> int:
        """Number of rows to skip for the current page."""
        self._require_valid_page()
        return (self.page - 1) * self.per_page

    def limit(self) -> int:
        """Number of rows to take for the current page."""
        return self.per_page

    def set_total(self, total: int) -> None:
        """Record the total item count and derive the page count."""
        if total < 0:
            raise PaginationError(f"total must not be negative, got {total}")
        if self.per_page <= 0:
            raise PaginationError(f"per_page must be positive, got {self.per_page}")
        self.total = total
        self.total_pages = -(-total // self.per_page)

    def has_next(self) -> bool:
        return self.total_pages is not None and self.page < self.total_pages

    def has_prev(self) -> bool:
        return self.page > 1

    def start_item(self) -> int:
        """1-based number of the first item on the current page."""
        return self.offset() + 1

    def end_item(self) -> int:
        """1-based number of the last item the current page can hold."""
        return self.page * self.per_page

    def next_page(self) -> int | None:
        return self.page + 1 if self.has_next() else None

    def prev_page(self) -> int | None:
        return self.page - 1 if self.has_prev() else None


@dataclass
class PaginatedResult(Generic[T]):
    """The items of one page together with its pagination metadata."""

    data: list[T] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def with_total(
        cls, data: Iterable[T], pagination: Pagination, total: int
    ) -> PaginatedResult[T]:
        """Build a result whose pagination carries ``total``; ``pagination`` is copied."""
        meta = replace(pagination)
        meta.set_total(total)
        return cls(list(data), meta)

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[T]:
        return iter(self.data)

    def map(self, func: Callable[[T], U]) -> PaginatedResult[U]:
        """Apply ``func`` to every item, keeping the pagination metadata."""
        return PaginatedResult([func(item) for item in self.data], self.pagination)


@dataclass
class CursorPagination:
    """Pagination that continues from a cursor instead of an offset."""

    cursor: str | None = None
    limit: int = DEFAULT_PER_PAGE
    include_cursor: bool = False
    has_next: bool = False
    has_prev: bool = False
    next_cursor: str | None = None
    prev_cursor: str | None = None
    total: int | None = None

    @classmethod
    def with_cursor(cls, limit: int, cursor: str | None) -> CursorPagination:
        """Start from ``cursor``; a present cursor means earlier items exist."""
        return cls(cursor=cursor, limit=limit, has_prev=cursor is not None)


@dataclass
class CursorPaginatedResult(Generic[T]):
    """The items of one cursor page together with its metadata."""

    data: list[T] = field(default_factory=list)
    pagination: CursorPagination = field(default_factory=CursorPagination)