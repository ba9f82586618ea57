"""Short constructors for filters, sorts, searches, pages and queries."""

from __future__ import annotations

from typing import Any

from edgeorm.filters import (
    And,
    Condition,
    Filter,
    FilterOperator,
    FilterValue,
    Not,
    Or,
    SearchFilter,
    Sort,
)
from edgeorm.pagination import DEFAULT_PER_PAGE, Pagination
from edgeorm.query import QueryBuilder
from edgeorm.types import Operator, SortOrder


def _expect(name: str, args: tuple[Any, ...], count: int) -> None:
    if len(args) != count:
        raise TypeError(f"{name!r} takes {count} operand(s), got {len(args)}")


def _operator(op: str) -> Operator:
    for candidate in (op, op.upper()):
        try:
            return Operator(candidate)
        except ValueError:
            continue
    raise ValueError(f"unknown filter operator: {op!r}")


def make_filter(column: str, op: Operator | str, *args: Any) -> Filter:
    """A filter from a column, an operator and its operands.

    ``op`` may be an :class:`Operator`, its SQL text, or one of the words
    ``in``, ``not_in``, ``between``, ``not_between``, ``is_null`` and
    ``is_not_null``.
    """
    if isinstance(op, str):
        word = op.lower()
        if word in ("in", "not_in"):
            _expect(op, args, 1)
            build = Filter.in_values if word == "in" else Filter.not_in_values
            return build(column, args[0])
        if word in ("between", "not_between"):
            _expect(op, args, 2)
            build = Filter.between if word == "between" else Filter.not_between
            return build(column, args[0], args[1])
        if word in ("is_null", "is_not_null"):
            _expect(op, args, 0)
            return Filter.is_null(column) if word == "is_null" else Filter.is_not_null(column)
        op = _operator(op)
    _expect(str(op), args, 1)
    return Filter(column, op, FilterValue.single(args[0]))


def make_sort(column: str, order: SortOrder | str | None = None) -> Sort:
    """An ascending sort unless ``order`` says ``desc``."""
    if order is None:
        return Sort.asc(column)
    if isinstance(order, SortOrder):
        return Sort(column, order)
    word = str(order).lower()
    if word == "asc":
        return Sort.asc(column)
    if word == "desc":
        return Sort.desc(column)
    raise ValueError(f"unknown sort order: {order!r}")


def make_search(query: str, *args: str) -> SearchFilter:
    """A search for ``query`` over the given columns."""
    return SearchFilter(query, args)


def make_pagination(page: int, per_page: int = DEFAULT_PER_PAGE) -> Pagination:
    return Pagination(page, per_page)


def make_query(table: str) -> QueryBuilder:
    return QueryBuilder(table)


def make_filter_op(kind: str | Filter, *args: Any) -> FilterOperator:
    """``"and"``/``"or"`` over expressions, ``"not"`` of one, or a bare filter."""
    if isinstance(kind, Filter):
        _expect("filter", args, 0)
        return Condition(kind)
    word = str(kind).lower()
    if word == "and":
        return And(args)
    if word == "or":
        return Or(args)
    if word == "not":
        _expect("not", args, 1)
        return Not(args[0])
    raise ValueError(f"unknown filter combination: {kind!r}")