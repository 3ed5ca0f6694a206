from __future__ import annotations

from typing import Any, List

from .paths import split_path

_MISSING = object()


def resolve(record: Any, path: str) -> List[Any]:
    """Retrieve every value a dot path reaches inside one record.

    Each list met along the path fans out into its elements, so
    ``resolve({"a": {"b": [{"c": 1}, {"c": 2}]}}, "a.b.c")`` gives ``[1, 2]``.
    Candidates that are not dicts stop contributing at that step and absent
    keys contribute nothing. Explicit nulls are kept as ``None``.
    """
    values: List[Any] = [record]

    for key in split_path(path):
        next_values: List[Any] = []
        for candidate in values:
            if not isinstance(candidate, dict):
                continue
            value = candidate.get(key, _MISSING)
            if value is _MISSING:
                continue
            if isinstance(value, list):
                next_values.extend(value)
            else:
                next_values.append(value)
        values = next_values
        if not values:
            break

    return values


def first_value(record: Any, path: str, default: Any = '') -> Any:
    """Return the first resolved value, or *default* when there is none or it is null."""
    values = resolve(record, path)
    if not values or values[0] is None:
        return default
    return values[0]
