import pytest

from edgeorm.filters import (
    And,
    Condition,
    Custom,
    Filter,
    FilterValue,
    FilterValueKind,
    Not,
    Or,
    SearchFilter,
    Sort,
)
from edgeorm.types import Operator, SortOrder, Value


def test_eq_builds_single_value():
    f = Filter.eq("status", "active")
    assert f.column == "status"
    assert f.operator is Operator.EQ
    assert f.value.kind is FilterValueKind.SINGLE
    assert f.value.values == (Value.text("active"),)


@pytest.mark.parametrize(
    "factory, operator",
    [
        (Filter.ne, Operator.NE),
        (Filter.lt, Operator.LT),
        (Filter.le, Operator.LE),
        (Filter.gt, Operator.GT),
        (Filter.ge, Operator.GE),
    ],
)
def test_comparison_factories(factory, operator):
    f = factory("age", 18)
    assert f.operator is operator
    assert f.value == FilterValue.single(18)
    assert f.value.values == (Value.integer(18),)


def test_boolean_value_is_kept_as_boolean():
    f = Filter.eq("is_active", True)
    assert f.value.values == (Value.boolean(True),)


def test_like_and_not_like():
    assert Filter.like("name", "%john%").value.values == (Value.text("%john%"),)
    assert Filter.like("name", "%john%").operator is Operator.LIKE
    assert Filter.not_like("name", "%john%").operator is Operator.NOT_LIKE


def test_like_requires_text_pattern():
    with pytest.raises(TypeError):
        Filter.like("name", 5)


def test_in_and_not_in_values():
    f = Filter.in_values("role", ["admin", "user"])
    assert f.operator is Operator.IN
    assert f.value.kind is FilterValueKind.MULTIPLE
    assert f.value.values == (Value.text("admin"), Value.text("user"))
    assert Filter.not_in_values("role", ["admin"]).operator is Operator.NOT_IN


def test_null_checks_carry_null_value():
    assert Filter.is_null("deleted_at").operator is Operator.IS_NULL
    assert Filter.is_null("deleted_at").value.values == (Value.null(),)
    assert Filter.is_not_null("deleted_at").operator is Operator.IS_NOT_NULL


def test_between_is_a_range():
    f = Filter.between("score", 80, 100)
    assert f.operator is Operator.BETWEEN
    assert f.value.kind is FilterValueKind.RANGE
    assert f.value.values == (Value.integer(80), Value.integer(100))
    assert Filter.not_between("score", 80, 100).operator is Operator.NOT_BETWEEN


def test_simple_accepts_value_objects():
    f = Filter.simple("x", Operator.GT, Value.real(1.5))
    assert f.value.values == (Value.real(1.5),)


def test_and_with_appends_to_existing_and():
    a = Condition(Filter.eq("a", 1))
    b = Condition(Filter.eq("b", 2))
    c = Condition(Filter.eq("c", 3))
    combined = And([a, b]).and_with(c)
    assert combined == And((a, b, c))


def test_and_with_wraps_other_expressions():
    a = Condition(Filter.eq("a", 1))
    b = Condition(Filter.eq("b", 2))
    assert a.and_with(b) == And((a, b))
    assert Or([a]).and_with(b) == And((Or([a]), b))


def test_or_with_appends_or_wraps():
    a = Condition(Filter.eq("role", "admin"))
    b = Condition(Filter.eq("role", "moderator"))
    c = Custom("1 = 1")
    assert a.or_with(b) == Or((a, b))
    assert Or([a, b]).or_with(c) == Or((a, b, c))


def test_negate_and_invert():
    a = Condition(Filter.eq("a", 1))
    assert a.negate() == Not(a)
    assert ~a == Not(a)
    assert ~~a == Not(Not(a))


def test_groups_reject_non_expressions():
    with pytest.raises(TypeError):
        And([Filter.eq("a", 1)])
    with pytest.raises(TypeError):
        Not("a = 1")


def test_search_defaults():
    s = SearchFilter("john", ["name", "email"])
    assert s.columns == ("name", "email")
    assert s.case_sensitive is False
    assert s.exact_match is False


def test_search_single_column_gives_condition():
    op = SearchFilter.single_field("name", "john").to_filter_operator()
    assert op == Condition(Filter.like("name", "%john%"))


def test_search_many_columns_gives_or():
    op = SearchFilter.multiple_fields(["name", "email"], "john").to_filter_operator()
    assert isinstance(op, Or)
    assert [c.filter.column for c in op.filters] == ["name", "email"]
    assert all(c.filter.operator is Operator.LIKE for c in op.filters)


def test_search_exact_match_uses_equality():
    s = SearchFilter("John Doe", ["full_name"]).with_exact_match(True)
    assert s.to_filter_operator() == Condition(Filter.eq("full_name", "John Doe"))


def test_builder_methods_return_new_objects():
    s = SearchFilter("john", ["name"])
    t = s.with_case_sensitive(True)
    assert t.case_sensitive is True
    assert s.case_sensitive is False


def test_improved_search_always_uses_like():
    exact = SearchFilter("john", ["name"]).with_exact_match(True)
    assert exact.to_filter_operator_improved() == Condition(Filter.like("name", "john"))
    loose = SearchFilter("john", ["name"])
    assert loose.to_filter_operator_improved() == Condition(Filter.like("name", "%john%"))


def test_sort_constructors():
    assert Sort.asc("name") == Sort("name", SortOrder.ASC)
    assert Sort.desc("created_at").order is SortOrder.DESC
    assert Sort.from_bool("name", True).order is SortOrder.ASC
    assert Sort.from_bool("name", False).order is SortOrder.DESC
    assert Sort("name").order is SortOrder.ASC