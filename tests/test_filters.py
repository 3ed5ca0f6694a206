"""Tests for the per-column filter evaluator."""

import pytest

from json_table_explorer.filters import OPERATORS, FilterSpec, matches, needs_operand1, needs_operand2


def f(field, operator, operand1="", operand2=""):
    return FilterSpec(id="1", field=field, operator=operator, operand1=operand1, operand2=operand2)


def test_contains_is_case_insensitive():
    assert matches({"name": "Alice"}, f("name", "contains", "LIC"))
    assert not matches({"name": "Alice"}, f("name", "contains", "bob"))


def test_equals_is_exact_string_equality():
    assert matches({"age": 30}, f("age", "equals", "30"))
    assert not matches({"name": "Alice"}, f("name", "equals", "alice"))
    assert matches({"ok": True}, f("ok", "equals", "true"))


def test_greater_and_less_than():
    assert matches({"age": 35}, f("age", ">", "30"))
    assert not matches({"age": 25}, f("age", ">", "30"))
    assert matches({"age": "25"}, f("age", "<", "30"))


def test_relational_fails_closed_when_unparseable():
    assert not matches({"age": "x"}, f("age", ">", "30"))
    assert not matches({"age": 35}, f("age", ">", "abc"))
    assert not matches({"age": 35}, f("age", "<", ""))


def test_between_is_inclusive():
    spec = f("n", "between", "1", "3")
    assert matches({"n": 1}, spec)
    assert matches({"n": 3}, spec)
    assert not matches({"n": 3.5}, spec)
    assert not matches({"n": 2}, f("n", "between", "1", ""))


def test_is_empty_on_values():
    assert matches({"s": "  "}, f("s", "is_empty"))
    assert not matches({"s": "x"}, f("s", "is_empty"))
    assert matches({"s": "x"}, f("s", "is_not_empty"))


def test_null_values_never_match():
    assert not matches({"s": None}, f("s", "is_empty"))
    assert not matches({"s": None}, f("s", "contains", ""))


def test_missing_path_rejects_record():
    assert not matches({"a": 1}, f("b", "contains", ""))
    assert not matches({"a": 1}, f("b", "is_empty"))


def test_unknown_operator_rejects():
    assert not matches({"a": 1}, f("a", "regex", "1"))


def test_any_fanned_out_value_can_match():
    record = {"orders": [{"total": 5}, {"total": 150}]}
    assert matches(record, f("orders.total", ">", "100"))
    assert not matches(record, f("orders.total", ">", "200"))


@pytest.mark.parametrize(
    "operator,operand,expected",
    [
        ("is_empty", "", False),
        ("is_not_empty", "", True),
        ("length_equals", "2", True),
        ("length_gt", "1", True),
        ("length_lt", "2", False),
        ("length_gt", "abc", False),
        ("contains", "zzz", True),
        ("equals", "nope", True),
    ],
)
def test_array_shape_operators(operator, operand, expected):
    """Test undotted array fields are filtered on their length; value operators pass through."""
    assert matches({"tags": ["a", "b"]}, f("tags", operator, operand)) is expected


def test_empty_array_is_empty():
    assert matches({"tags": []}, f("tags", "is_empty"))
    assert not matches({"tags": []}, f("tags", "is_not_empty"))


def test_length_operators_on_non_array_values_reject():
    assert not matches({"name": "abc"}, f("name", "length_equals", "3"))


def test_filter_spec_from_dict_accepts_val_aliases():
    spec = FilterSpec.from_dict({"id": 1, "field": "age", "operator": ">", "val1": "30"})
    assert spec == FilterSpec(id="1", field="age", operator=">", operand1="30", operand2="")


def test_operator_catalogue():
    assert [value for value, _ in OPERATORS][:2] == ["contains", "equals"]
    assert len(OPERATORS) == 10
    assert not needs_operand1("is_empty")
    assert needs_operand1("between") and needs_operand2("between")
    assert not needs_operand2(">")
