from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from .accessors import resolve
from .values import value_to_text

ROW_NUMBER_COLUMN = "#"


def format_cell_value(value: Any) -> str:
    """Short display text for one JSON value.

    Primitive arrays are joined with ", ", arrays of objects collapse to
    ``[n items]``, and objects with more than three keys to ``{n fields}``.
    """
    if value is None:
        return ''
    if isinstance(value, list):
        if not value:
            return '[]'
        if all(not isinstance(v, (dict, list)) for v in value):
            return ", ".join('' if v is None else value_to_text(v) for v in value)
        return f"[{len(value)} items]"
    if isinstance(value, dict):
        if len(value) <= 3:
            return ", ".join(f"{k}: {format_cell_value(v)}" for k, v in value.items())
        return f"{{{len(value)} fields}}"
    return value_to_text(value)


def format_cell(record: Any, column: str) -> str:
    values = resolve(record, column)
    if len(values) > 1:
        return ", ".join(format_cell_value(v) for v in values)
    return format_cell_value(values[0] if values else None)


def flatten_rows_for_display(
    records: Sequence[Any],
    columns: List[str],
    start: int = 0,
    end: int = -1,
) -> List[Dict[str, Any]]:
    """Flatten ``records[start:end + 1]`` into display rows keyed by column path."""
    rows: List[Dict[str, Any]] = []
    if end < start:
        return rows

    for index in range(max(0, start), min(end + 1, len(records))):
        record = records[index]
        row: Dict[str, Any] = {ROW_NUMBER_COLUMN: index}
        for column in columns:
            row[column] = format_cell(record, column)
        rows.append(row)
    return rows


def format_detail(record: Any) -> str:
    if record is None:
        return ''
    return json.dumps(record, indent=2, ensure_ascii=False)
