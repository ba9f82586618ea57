"""Fluent SQL query building and execution."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, TypeVar

from edgeorm.database import Database
from edgeorm.errors import OrmError, QueryError, SerializationError
from edgeorm.filters import (
    And,
    Condition,
    Custom,
    Filter,
    FilterOperator,
    FilterValueKind,
    Not,
    Or,
    Sort,
)
from edgeorm.pagination import PaginatedResult, Pagination
from edgeorm.types import Aggregate, JoinType, Operator, Value

T = TypeVar("T")

Statement = tuple[str, list[Any]]


@dataclass
class QueryResult(Generic[T]):
    """Query results with an optional total count."""

    data: list[T] = field(default_factory=list)
    total: int | None = None

    @classmethod
    def with_total(cls, data: Iterable[T], total: int) -> QueryResult[T]:
        return cls(list(data), total)


@dataclass(frozen=True)
class _Join:
    join_type: JoinType
    table: str
    alias: str | None
    condition: str

    def sql(self) -> str:
        text = f" {self.join_type} {self.table}"
        if self.alias is not None:
            text += f" AS {self.alias}"
        return f"{text} ON {self.condition}"


@dataclass(frozen=True)
class _AggregateClause:
    function: Aggregate
    column: str
    alias: str | None


def _to_json(value: Any) -> Any:
    """Turn a column value into its JSON-like form."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return list(bytes(value))
    return value


def _read_int(rows: list[Any]) -> int | None:
    value = rows[0][0]
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


class QueryBuilder:
    """Builds SELECT statements; every builder method changes the builder and returns it."""

    def __init__(self, table: str) -> None:
        self.table = str(table)
        self._select_columns: list[str] = ["*"]
        self._joins: list[_Join] = []
        self._where: list[FilterOperator] = []
        self._group_by: list[str] = []
        self._having: list[FilterOperator] = []
        self._order_by: list[Sort] = []
        self._limit: int | None = None
        self._offset: int | None = None
        self._distinct = False
        self._aggregate: _AggregateClause | None = None

    def select(self, columns: Iterable[str]) -> QueryBuilder:
        self._select_columns = [str(c) for c in columns]
        return self

    def join(self, join_type: JoinType, table: str, condition: str) -> QueryBuilder:
        self._joins.append(_Join(join_type, table, None, condition))
        return self

    def join_as(
        self, join_type: JoinType, table: str, alias: str, condition: str
    ) -> QueryBuilder:
        self._joins.append(_Join(join_type, table, alias, condition))
        return self

    def where(self, filter: FilterOperator) -> QueryBuilder:
        self._where.append(filter)
        return self

    def group_by(self, columns: Iterable[str]) -> QueryBuilder:
        self._group_by = [str(c) for c in columns]
        return self

    def having(self, filter: FilterOperator) -> QueryBuilder:
        self._having.append(filter)
        return self

    def order_by(self, sort: Sort) -> QueryBuilder:
        self._order_by.append(sort)
        return self

    def order_by_multiple(self, sorts: Iterable[Sort]) -> QueryBuilder:
        self._order_by.extend(sorts)
        return self

    def limit(self, limit: int) -> QueryBuilder:
        self._limit = limit
        return self

    def offset(self, offset: int) -> QueryBuilder:
        self._offset = offset
        return self

    def distinct(self, distinct: bool) -> QueryBuilder:
        self._distinct = distinct
        return self

    def aggregate(
        self, function: Aggregate, column: str, alias: str | None = None
    ) -> QueryBuilder:
        self._aggregate = _AggregateClause(function, column, alias)
        return self

    def select_all(self) -> QueryBuilder:
        self._select_columns = ["*"]
        return self

    def select_columns(self, columns: Iterable[str]) -> QueryBuilder:
        return self.select(columns)

    def select_column(self, column: str) -> QueryBuilder:
        self._select_columns = [column]
        return self

    def select_count(self) -> QueryBuilder:
        self._select_columns = ["COUNT(*)"]
        return self

    def select_aggregate(self, aggregate: str) -> QueryBuilder:
        self._select_columns = [aggregate]
        return self

    def select_distinct(self, column: str) -> QueryBuilder:
        self._select_columns = [column]
        self._distinct = True
        return self

    def where_condition(self, condition: str, params: Iterable[Any] = ()) -> QueryBuilder:
        """Add a raw condition; ``params`` are not bound."""
        self._where.append(Custom(condition))
        return self

    def search(self, field: str, query: str) -> QueryBuilder:
        self._where.append(Custom(f"{field} LIKE '%{query}%'"))
        return self

    def with_filter(self, filter: Filter) -> QueryBuilder:
        self._where.append(Condition(filter))
        return self

    def with_filters(self, filters: Iterable[Filter]) -> QueryBuilder:
        for item in filters:
            self.with_filter(item)
        return self

    def with_sorts(self, sorts: Iterable[Sort]) -> QueryBuilder:
        for sort in sorts:
            self.order_by(sort)
        return self

    def having_condition(self, condition: str, params: Iterable[Any] = ()) -> QueryBuilder:
        """Add a raw HAVING condition; ``params`` are not bound."""
        self._having.append(Custom(condition))
        return self

    def where_in(self, field: str, subquery: QueryBuilder) -> QueryBuilder:
        try:
            subquery_sql, _ = subquery.build()
        except OrmError:
            subquery_sql = ""
        self._where.append(Custom(f"{field} IN ({subquery_sql})"))
        return self

    def copy(self) -> QueryBuilder:
        """An independent builder with the same state."""
        other = QueryBuilder(self.table)
        other._select_columns = list(self._select_columns)
        other._joins = list(self._joins)
        other._where = list(self._where)
        other._group_by = list(self._group_by)
        other._having = list(self._having)
        other._order_by = list(self._order_by)
        other._limit = self._limit
        other._offset = self._offset
        other._distinct = self._distinct
        other._aggregate = self._aggregate
        return other

    def _from_to_having(self, parts: list[str], params: list[Any]) -> None:
        parts.append(f" FROM {self.table}")
        parts.extend(join.sql() for join in self._joins)
        if self._where:
            where_sql, where_params = self._build_conditions(self._where)
            parts.append(f" WHERE {where_sql}")
            params.extend(where_params)
        if self._group_by:
            parts.append(f" GROUP BY {', '.join(self._group_by)}")
        if self._having:
            having_sql, having_params = self._build_conditions(self._having)
            parts.append(f" HAVING {having_sql}")
            params.extend(having_params)

    def build(self) -> Statement:
        """The SELECT statement and its parameters."""
        parts = ["SELECT "]
        params: list[Any] = []
        if self._distinct:
            parts.append("DISTINCT ")
        if self._aggregate is not None:
            agg = self._aggregate
            parts.append(f"{agg.function}({agg.column})")
            if agg.alias is not None:
                parts.append(f" AS {agg.alias}")
        else:
            parts.append(", ".join(self._select_columns))
        self._from_to_having(parts, params)
        if self._order_by:
            terms = ", ".join(f"{s.column} {s.order}" for s in self._order_by)
            parts.append(f" ORDER BY {terms}")
        if self._limit is not None:
            parts.append(f" LIMIT {self._limit}")
        if self._offset is not None:
            parts.append(f" OFFSET {self._offset}")
        return "".join(parts), params

    def build_count(self) -> Statement:
        """A ``SELECT COUNT(*)`` statement with the same filters."""
        parts = ["SELECT COUNT(*)"]
        params: list[Any] = []
        self._from_to_having(parts, params)
        return "".join(parts), params

    def _build_conditions(self, filters: Iterable[FilterOperator]) -> Statement:
        return self._join_operators(filters, " AND ")

    def _join_operators(self, filters: Iterable[FilterOperator], glue: str) -> Statement:
        pieces: list[str] = []
        params: list[Any] = []
        for item in filters:
            sql, item_params = self._build_operator(item)
            pieces.append(sql)
            params.extend(item_params)
        return glue.join(pieces), params

    def _build_operator(self, operator: FilterOperator) -> Statement:
        match operator:
            case Condition(inner):
                return self._build_filter(inner)
            case And(filters):
                sql, params = self._join_operators(filters, " AND ")
                return f"({sql})", params
            case Or(filters):
                sql, params = self._join_operators(filters, " OR ")
                return f"({sql})", params
            case Not(inner):
                sql, params = self._build_operator(inner)
                return f"NOT ({sql})", params
            case Custom(sql):
                return sql, []
        raise QueryError(f"unsupported filter expression: {operator!r}")

    @staticmethod
    def _build_filter(item: Filter) -> Statement:
        if item.operator is Operator.IS_NULL:
            return f"{item.column} IS NULL", []
        if item.operator is Operator.IS_NOT_NULL:
            return f"{item.column} IS NOT NULL", []
        params = [v.to_sql() for v in item.value.values]
        kind = item.value.kind
        if kind is FilterValueKind.MULTIPLE:
            operand = "(" + ", ".join("?" for _ in params) + ")"
        elif kind is FilterValueKind.RANGE:
            operand = "? AND ?"
        else:
            operand = "?"
        return f"{item.column} {item.operator} {operand}", params

    def execute_count(self, db: Database) -> int:
        """Run the count statement and return the count."""
        sql, params = self.build_count()
        rows = db.query(sql, params)
        if not rows:
            raise QueryError("No count result")
        count = _read_int(rows)
        if count is None:
            raise QueryError("Failed to get count")
        return count

    def execute_aggregate(self, db: Database) -> list[Any]:
        """Run the statement and return the raw rows."""
        sql, params = self.build()
        return db.query(sql, params)

    @staticmethod
    def _convert(row: Any, model: Any) -> Any:
        if model is not None and hasattr(model, "from_map"):
            return model.from_map({key: Value.from_sql(row[key]) for key in row.keys()})
        record = {key: _to_json(row[key]) for key in row.keys()}
        if model is None:
            return record
        return model(record)

    def execute(
        self, db: Database, model: Callable[[dict[str, Any]], T] | Any = None
    ) -> list[Any]:
        """Run the query and convert each row.

        Without ``model`` each row is a dict of JSON-like values. A ``model``
        with a ``from_map`` method receives a dict of :class:`Value`; any other
        callable receives the JSON-like dict.
        """
        sql, params = self.build()
        results = []
        for row in db.query(sql, params):
            try:
                results.append(self._convert(row, model))
            except OrmError:
                raise
            except (TypeError, ValueError, KeyError) as exc:
                raise SerializationError(str(exc)) from exc
        return results

    def execute_paginated(
        self, db: Database, pagination: Pagination, model: Any = None
    ) -> PaginatedResult[Any]:
        """Run one page of the query together with the table's total row count."""
        count_sql, count_params = (
            QueryBuilder(self.table).select(["COUNT(*) as count"]).build_count()
        )
        rows = db.query(count_sql, count_params)
        total = (_read_int(rows) if rows else None) or 0
        data = (
            self.copy()
            .limit(pagination.limit())
            .offset(pagination.offset())
            .execute(db, model)
        )
        return PaginatedResult.with_total(data, pagination, total)