import pytest

from edgeorm.errors import PaginationError
from edgeorm.pagination import (
    CursorPaginatedResult,
    CursorPagination,
    PaginatedResult,
    Pagination,
)


def test_documented_example():
    pagination = Pagination(2, 10)
    pagination.set_total(45)
    assert pagination.offset() == 10
    assert pagination.limit() == 10
    assert pagination.total_pages == 5
    assert pagination.total == 45
    assert pagination.has_prev()
    assert pagination.has_next()


def test_defaults():
    pagination = Pagination()
    assert pagination.page == 1
    assert pagination.per_page == 20
    assert pagination.total is None
    assert pagination.total_pages is None


def test_first_page_has_no_previous():
    pagination = Pagination(1, 10)
    assert pagination.offset() == 0
    assert not pagination.has_prev()
    assert pagination.prev_page() is None


def test_has_next_false_without_total():
    pagination = Pagination(1, 10)
    assert not pagination.has_next()
    assert pagination.next_page() is None


@pytest.mark.parametrize("page", [1, 2, 3, 7])
@pytest.mark.parametrize("per_page", [1, 5, 20])
def test_item_bounds_are_consistent(page, per_page):
    pagination = Pagination(page, per_page)
    assert pagination.start_item() == pagination.offset() + 1
    assert pagination.end_item() == pagination.offset() + pagination.limit()
    assert pagination.end_item() - pagination.start_item() + 1 == per_page


@pytest.mark.parametrize("total", [1, 9, 10, 11, 45, 100, 101])
@pytest.mark.parametrize("per_page", [1, 3, 10])
def test_total_pages_covers_total(total, per_page):
    pagination = Pagination(1, per_page)
    pagination.set_total(total)
    assert pagination.total_pages * per_page >= total
    assert (pagination.total_pages - 1) * per_page < total


def test_zero_total_gives_zero_pages():
    pagination = Pagination(1, 10)
    pagination.set_total(0)
    assert pagination.total_pages == 0
    assert not pagination.has_next()


def test_last_page_has_no_next():
    pagination = Pagination(5, 10)
    pagination.set_total(45)
    assert not pagination.has_next()
    assert pagination.next_page() is None
    assert pagination.prev_page() == 4


def test_next_page_follows_current():
    pagination = Pagination(2, 10)
    pagination.set_total(45)
    assert pagination.next_page() == pagination.page + 1
    assert pagination.prev_page() == pagination.page - 1


def test_page_zero_is_rejected():
    with pytest.raises(PaginationError):
        Pagination(0, 10).offset()
    with pytest.raises(PaginationError):
        Pagination(0, 10).start_item()


def test_zero_per_page_rejected_for_total():
    with pytest.raises(PaginationError):
        Pagination(1, 0).set_total(10)


def test_negative_total_rejected():
    with pytest.raises(PaginationError):
        Pagination(1, 10).set_total(-1)


def test_paginated_result_with_total_copies_pagination():
    original = Pagination(1, 10)
    result = PaginatedResult.with_total(["item1", "item2"], original, 25)
    assert result.pagination.total == 25
    assert result.pagination.total_pages == 3
    assert original.total is None
    assert result.data == ["item1", "item2"]


def test_paginated_result_len_and_iter():
    result = PaginatedResult(["a", "b", "c"], Pagination(1, 10))
    assert len(result) == 3
    assert list(result) == ["a", "b", "c"]
    assert not PaginatedResult([], Pagination())


def test_paginated_result_map_keeps_metadata():
    result = PaginatedResult.with_total([1, 2, 3], Pagination(1, 10), 3)
    mapped = result.map(str)
    assert mapped.data == ["1", "2", "3"]
    assert mapped.pagination == result.pagination


def test_cursor_pagination_defaults():
    pagination = CursorPagination()
    assert pagination.limit == 20
    assert pagination.cursor is None
    assert not pagination.has_prev
    assert not pagination.has_next


def test_cursor_pagination_with_cursor():
    pagination = CursorPagination.with_cursor(10, "cursor_value")
    assert pagination.cursor == "cursor_value"
    assert pagination.limit == 10
    assert pagination.has_prev
    assert not pagination.include_cursor


def test_cursor_pagination_without_cursor():
    pagination = CursorPagination.with_cursor(10, None)
    assert pagination.cursor is None
    assert not pagination.has_prev


def test_cursor_paginated_result():
    pagination = CursorPagination(limit=10)
    result = CursorPaginatedResult(["item1", "item2"], pagination)
    assert result.data == ["item1", "item2"]
    assert result.pagination is pagination
    assert not result.pagination.has_next