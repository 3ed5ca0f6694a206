"""Tests for dot-path resolution."""

from json_table_explorer.accessors import first_value, resolve


def test_resolve_fans_out_arrays_of_objects():
    """Test the nested array example resolves to every leaf value in order."""
    assert resolve({"a": {"b": [{"c": 1}, {"c": 2}]}}, "a.b.c") == [1, 2]


def test_resolve_top_level_field():
    assert resolve({"age": 30}, "age") == [30]


def test_resolve_primitive_array_spreads_elements():
    assert resolve({"tags": ["x", "y"]}, "tags") == ["x", "y"]


def test_resolve_missing_key_gives_nothing():
    assert resolve({"a": 1}, "b") == []
    assert resolve({"a": {"b": 1}}, "a.c") == []


def test_resolve_drops_non_object_candidates():
    """Test a path that walks through a primitive stops there."""
    assert resolve({"a": 5}, "a.b") == []
    assert resolve({"a": [1, {"b": 2}, "s"]}, "a.b") == [2]


def test_resolve_keeps_explicit_null():
    assert resolve({"a": None}, "a") == [None]
    assert resolve({"a": None}, "a.b") == []


def test_resolve_never_raises_on_odd_input():
    assert resolve(None, "a") == []
    assert resolve([1, 2], "a") == []
    assert resolve("text", "a.b") == []


def test_first_value_defaults():
    assert first_value({"a": [3, 4]}, "a") == 3
    assert first_value({}, "a") == ''
    assert first_value({"a": None}, "a") == ''
