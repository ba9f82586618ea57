"""Filter expressions, text search and sort specifications."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from edgeorm.types import Operator, SortOrder, Value


class FilterValueKind(enum.Enum):
    """Shape of the operand of a filter."""

    SINGLE = "single"
    MULTIPLE = "multiple"
    RANGE = "range"


@dataclass(frozen=True)
class FilterValue:
    """The operand of a filter: one value, a list of values or a range."""

    kind: FilterValueKind
    values: tuple[Value, ...]

    @classmethod
    def single(cls, value: Any) -> FilterValue:
        return cls(FilterValueKind.SINGLE, (Value.from_python(value),))

    @classmethod
    def multiple(cls, values: Iterable[Any]) -> FilterValue:
        return cls(FilterValueKind.MULTIPLE, tuple(Value.from_python(v) for v in values))

    @classmethod
    def range(cls, low: Any, high: Any) -> FilterValue:
        return cls(FilterValueKind.RANGE, (Value.from_python(low), Value.from_python(high)))


@dataclass(frozen=True)
class Filter:
    """A single comparison between a column and a value."""

    column: str
    operator: Operator
    value: FilterValue

    @classmethod
    def simple(cls, column: str, operator: Operator, value: Any) -> Filter:
        return cls(column, operator, FilterValue.single(value))

    @classmethod
    def eq(cls, column: str, value: Any) -> Filter:
        return cls.simple(column, Operator.EQ, value)

    @classmethod
    def ne(cls, column: str, value: Any) -> Filter:
        return cls.simple(column, Operator.NE, value)

    @classmethod
    def lt(cls, column: str, value: Any) -> Filter:
        return cls.simple(column, Operator.LT, value)

    @classmethod
    def le(cls, column: str, value: Any) -> Filter:
        return cls.simple(column, Operator.LE, value)

    @classmethod
    def gt(cls, column: str, value: Any) -> Filter:
        return cls.simple(column, Operator.GT, value)

    @classmethod
    def ge(cls, column: str, value: Any) -> Filter:
        return cls.simple(column, Operator.GE, value)

    @classmethod
    def like(cls, column: str, pattern: str) -> Filter:
        return cls(column, Operator.LIKE, FilterValue.single(Value.text(pattern)))

    @classmethod
    def not_like(cls, column: str, pattern: str) -> Filter:
        return cls(column, Operator.NOT_LIKE, FilterValue.single(Value.text(pattern)))

    @classmethod
    def in_values(cls, column: str, values: Iterable[Any]) -> Filter:
        return cls(column, Operator.IN, FilterValue.multiple(values))

    @classmethod
    def not_in_values(cls, column: str, values: Iterable[Any]) -> Filter:
        return cls(column, Operator.NOT_IN, FilterValue.multiple(values))

    @classmethod
    def is_null(cls, column: str) -> Filter:
        return cls(column, Operator.IS_NULL, FilterValue.single(None))

    @classmethod
    def is_not_null(cls, column: str) -> Filter:
        return cls(column, Operator.IS_NOT_NULL, FilterValue.single(None))

    @classmethod
    def between(cls, column: str, low: Any, high: Any) -> Filter:
        return cls(column, Operator.BETWEEN, FilterValue.range(low, high))

    @classmethod
    def not_between(cls, column: str, low: Any, high: Any) -> Filter:
        return cls(column, Operator.NOT_BETWEEN, FilterValue.range(low, high))


class FilterOperator:
    """Base of all filter expressions."""

    def and_with(self, other: FilterOperator) -> FilterOperator:
        """Combine with ``other`` using AND."""
        return And((self, other))

    def or_with(self, other: FilterOperator) -> FilterOperator:
        """Combine with ``other`` using OR."""
        return Or((self, other))

    def negate(self) -> FilterOperator:
        """Wrap this expression in NOT."""
        return Not(self)

    def __invert__(self) -> FilterOperator:
        return self.negate()


def _as_operators(items: Iterable[FilterOperator]) -> tuple[FilterOperator, ...]:
    result = tuple(items)
    for item in result:
        if not isinstance(item, FilterOperator):
            raise TypeError(f"expected FilterOperator, got {type(item).__name__}")
    return result


@dataclass(frozen=True)
class Condition(FilterOperator):
    """A single filter condition."""

    filter: Filter


@dataclass(frozen=True)
class And(FilterOperator):
    """All of the contained expressions must hold."""

    filters: tuple[FilterOperator, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", _as_operators(self.filters))

    def and_with(self, other: FilterOperator) -> FilterOperator:
        return And(self.filters + (other,))


@dataclass(frozen=True)
class Or(FilterOperator):
    """At least one of the contained expressions must hold."""

    filters: tuple[FilterOperator, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", _as_operators(self.filters))

    def or_with(self, other: FilterOperator) -> FilterOperator:
        return Or(self.filters + (other,))


@dataclass(frozen=True)
class Not(FilterOperator):
    """The contained expression must not hold."""

    inner: FilterOperator

    def __post_init__(self) -> None:
        _as_operators((self.inner,))


@dataclass(frozen=True)
class Custom(FilterOperator):
    """A raw SQL condition used as is."""

    sql: str


@dataclass(frozen=True)
class SearchFilter:
    """Text search over one or more columns."""

    query: str
    columns: tuple[str, ...] = field(default_factory=tuple)
    case_sensitive: bool = False
    exact_match: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(str(c) for c in self.columns))

    @classmethod
    def single_field(cls, field: str, query: str) -> SearchFilter:
        return cls(query, (field,))

    @classmethod
    def multiple_fields(cls, fields: Iterable[str], query: str) -> SearchFilter:
        return cls(query, tuple(fields))

    def with_case_sensitive(self, case_sensitive: bool) -> SearchFilter:
        return replace(self, case_sensitive=case_sensitive)

    def with_exact_match(self, exact_match: bool) -> SearchFilter:
        return replace(self, exact_match=exact_match)

    @staticmethod
    def _combine(conditions: list[FilterOperator]) -> FilterOperator:
        if len(conditions) == 1:
            return conditions[0]
        return Or(conditions)

    def to_filter_operator(self) -> FilterOperator:
        """Equality per column for exact matches, ``LIKE %query%`` otherwise."""
        conditions: list[FilterOperator] = [
            Condition(
                Filter.eq(column, self.query)
                if self.exact_match
                else Filter.like(column, f"%{self.query}%")
            )
            for column in self.columns
        ]
        return self._combine(conditions)

    def to_filter_operator_improved(self) -> FilterOperator:
        """``LIKE`` per column, with the query itself as pattern for exact matches."""
        pattern = self.query if self.exact_match else f"%{self.query}%"
        conditions: list[FilterOperator] = [
            Condition(Filter.like(column, pattern)) for column in self.columns
        ]
        return self._combine(conditions)


@dataclass(frozen=True)
class Sort:
    """An ORDER BY term."""

    column: str
    order: SortOrder = SortOrder.ASC

    @classmethod
    def asc(cls, column: str) -> Sort:
        return cls(column, SortOrder.ASC)

    @classmethod
    def desc(cls, column: str) -> Sort:
        return cls(column, SortOrder.DESC)

    @classmethod
    def from_bool(cls, column: str, ascending: bool) -> Sort:
        return cls(column, SortOrder.ASC if ascending else SortOrder.DESC)