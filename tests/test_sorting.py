"""Tests for the sort comparator."""

import json

import pytest

from json_table_explorer.sorting import SortSpec, compare, sort_records, toggle_sort


def test_numeric_not_lexicographic():
    records = [{"age": 10}, {"age": 2}, {"age": 1}]
    assert sort_records(records, SortSpec("age", "asc")) == [{"age": 1}, {"age": 2}, {"age": 10}]


def test_descending():
    records = [{"age": 10}, {"age": 2}, {"age": 1}]
    assert sort_records(records, SortSpec("age", "desc")) == [{"age": 10}, {"age": 2}, {"age": 1}]


def test_strings_compare_case_insensitively_first():
    records = [{"n": "bob"}, {"n": "Alice"}, {"n": "carol"}]
    result = sort_records(records, SortSpec("n"))
    assert [r["n"] for r in result] == ["Alice", "bob", "carol"]


def test_sort_is_stable_in_both_directions():
    records = [{"k": 1, "i": 0}, {"k": 0, "i": 1}, {"k": 1, "i": 2}, {"k": 0, "i": 3}]
    asc = sort_records(records, SortSpec("k", "asc"))
    assert [r["i"] for r in asc] == [1, 3, 0, 2]
    desc = sort_records(records, SortSpec("k", "desc"))
    assert [r["i"] for r in desc] == [0, 2, 1, 3]


def test_missing_values_sort_as_empty_string():
    records = [{"n": "b"}, {}, {"n": "a"}]
    assert sort_records(records, SortSpec("n")) == [{}, {"n": "a"}, {"n": "b"}]


def test_compare_results():
    assert compare({"a": 1}, {"a": 2}, SortSpec("a")) == -1
    assert compare({"a": 1}, {"a": 2}, SortSpec("a", "desc")) == 1
    assert compare({"a": "1"}, {"a": 1}, SortSpec("a")) == 0


def test_sort_uses_first_fanned_out_value():
    records = [{"o": [{"t": 9}, {"t": 1}]}, {"o": [{"t": 5}]}]
    assert sort_records(records, SortSpec("o.t")) == [records[1], records[0]]


def test_sort_does_not_mutate_input():
    records = [{"a": 2}, {"a": 1}]
    sort_records(records, SortSpec("a"))
    assert records == [{"a": 2}, {"a": 1}]


def test_toggle_sort_cycle():
    first = toggle_sort(None, "age")
    assert first == SortSpec("age", "asc")
    assert toggle_sort(first, "age") == SortSpec("age", "desc")
    assert toggle_sort(SortSpec("age", "desc"), "age") == SortSpec("age", "asc")
    assert toggle_sort(first, "name") == SortSpec("name", "asc")


def test_invalid_direction():
    with pytest.raises(ValueError):
        SortSpec("a", "up")


def test_strings_with_nul_characters_sort():
    records = json.loads('[{"n": "b\\u0000x"}, {"n": "a"}, {"n": "b\\u0000"}]')
    result = sort_records(records, SortSpec("n"))
    assert [r["n"] for r in result] == ["a", "b\x00", "b\x00x"]
    assert compare(records[0], records[0], SortSpec("n")) == 0
