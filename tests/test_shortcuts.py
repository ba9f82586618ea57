import pytest

from edgeorm.filters import And, Condition, Filter, Not, Or, SearchFilter, Sort
from edgeorm.shortcuts import (
    make_filter,
    make_filter_op,
    make_pagination,
    make_query,
    make_search,
    make_sort,
)
from edgeorm.types import Operator, SortOrder


def test_make_filter_with_operator():
    assert make_filter("age", Operator.GT, 18) == Filter.gt("age", 18)


def test_make_filter_with_sql_text():
    assert make_filter("name", "like", "%john%") == Filter.simple("name", Operator.LIKE, "%john%")


def test_make_filter_in_and_not_in():
    assert make_filter("role", "in", ["admin", "user"]) == Filter.in_values("role", ["admin", "user"])
    assert make_filter("role", "not_in", ["x"]) == Filter.not_in_values("role", ["x"])


def test_make_filter_between():
    assert make_filter("score", "between", 80, 100) == Filter.between("score", 80, 100)
    assert make_filter("score", "not_between", 1, 2) == Filter.not_between("score", 1, 2)


def test_make_filter_null_checks():
    assert make_filter("deleted_at", "is_null") == Filter.is_null("deleted_at")
    assert make_filter("deleted_at", "is_not_null") == Filter.is_not_null("deleted_at")


def test_make_filter_unknown_operator():
    with pytest.raises(ValueError):
        make_filter("a", "roughly", 1)


def test_make_filter_wrong_operand_count():
    with pytest.raises(TypeError):
        make_filter("score", "between", 1)


def test_make_sort():
    assert make_sort("name") == Sort.asc("name")
    assert make_sort("created_at", "desc") == Sort.desc("created_at")
    assert make_sort("x", SortOrder.DESC).order is SortOrder.DESC


def test_make_sort_unknown_order():
    with pytest.raises(ValueError):
        make_sort("x", "sideways")


def test_make_search():
    assert make_search("john", "name", "email") == SearchFilter("john", ("name", "email"))


def test_make_pagination_default_per_page():
    pagination = make_pagination(3)
    assert pagination.per_page == 20
    assert pagination.page == 3


def test_make_query():
    assert make_query("users").build() == ("SELECT * FROM users", [])


def test_make_filter_op_combinations():
    a = Condition(Filter.eq("status", "active"))
    b = Condition(Filter.gt("age", 18))
    assert make_filter_op("and", a, b) == And((a, b))
    assert make_filter_op("or", a, b) == Or((a, b))
    assert make_filter_op("not", a) == Not(a)


def test_make_filter_op_single_filter():
    f = Filter.eq("role", "admin")
    assert make_filter_op(f) == Condition(f)


def test_make_filter_op_unknown_kind():
    with pytest.raises(ValueError):
        make_filter_op("xor")