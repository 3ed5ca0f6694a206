"""Tests for table cell formatting."""

from json_table_explorer.flattening import (
    ROW_NUMBER_COLUMN,
    flatten_rows_for_display,
    format_cell,
    format_cell_value,
    format_detail,
)


def test_format_cell_value():
    assert format_cell_value(None) == ""
    assert format_cell_value(False) == "false"
    assert format_cell_value(12) == "12"
    assert format_cell_value([]) == "[]"
    assert format_cell_value([1, None, "a"]) == "1, , a"
    assert format_cell_value([{"a": 1}, {"a": 2}]) == "[2 items]"
    assert format_cell_value({"a": 1, "b": "x"}) == "a: 1, b: x"
    assert format_cell_value({"a": 1, "b": 2, "c": 3, "d": 4}) == "{4 fields}"


def test_format_cell_joins_fanned_out_values():
    record = {"orders": [{"id": 1}, {"id": 2}], "tags": ["x", "y"]}
    assert format_cell(record, "orders.id") == "1, 2"
    assert format_cell(record, "tags") == "x, y"
    assert format_cell(record, "missing") == ""


def test_flatten_rows_for_display_window(people):
    rows = flatten_rows_for_display(people, ["name", "address.city"], 1, 2)
    assert rows == [
        {ROW_NUMBER_COLUMN: 1, "name": "bob", "address.city": "Paris"},
        {ROW_NUMBER_COLUMN: 2, "name": "Carol", "address.city": ""},
    ]
    assert flatten_rows_for_display(people, ["name"], 0, -1) == []
    assert len(flatten_rows_for_display(people, ["name"], 2, 99)) == 2


def test_format_detail():
    assert format_detail({"a": 1}) == '{\n  "a": 1\n}'
    assert format_detail(None) == ""
