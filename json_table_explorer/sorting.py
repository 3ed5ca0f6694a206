from __future__ import annotations

import locale
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, List, Optional, Sequence, Tuple

from .accessors import first_value
from .values import parse_finite, value_to_text

DIRECTIONS = ('asc', 'desc')


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: str = 'asc'

    def __post_init__(self):
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Unknown sort direction: {self.direction!r}")

    def flipped(self) -> 'SortSpec':
        return SortSpec(self.field, 'desc' if self.direction == 'asc' else 'asc')


def toggle_sort(current: Optional[SortSpec], field: str) -> SortSpec:
    """Column header click: a new field sorts ascending, the same field flips direction."""
    if current is not None and current.field == field:
        return current.flipped()
    return SortSpec(field, 'asc')


def _collation_key(text: str) -> Tuple[str, str, str]:
    # strxfrm rejects NUL; the raw text still breaks ties.
    plain = text.replace("\x00", "")
    return locale.strxfrm(plain.casefold()), locale.strxfrm(plain), text


def _collate(a: str, b: str) -> int:
    # Case-insensitive first, then case as a tie-breaker.
    ka, kb = _collation_key(a), _collation_key(b)
    return (ka > kb) - (ka < kb)


def _sort_value(record: Any, field: str) -> Tuple[Optional[float], str]:
    text = value_to_text(first_value(record, field, ''))
    return parse_finite(text), text


def _compare_values(a: Tuple[Optional[float], str], b: Tuple[Optional[float], str]) -> int:
    a_num, a_text = a
    b_num, b_text = b
    if a_num is not None and b_num is not None:
        return (a_num > b_num) - (a_num < b_num)
    return _collate(a_text, b_text)


def compare(a: Any, b: Any, sort: SortSpec) -> int:
    """Order two records by ``sort.field``: -1 before, 0 equal, 1 after.

    Both first values numeric -> numeric order; otherwise locale-aware
    string order. Descending negates the result.
    """
    result = _compare_values(_sort_value(a, sort.field), _sort_value(b, sort.field))
    return -result if sort.direction == 'desc' else result


def sort_records(records: Sequence[Any], sort: SortSpec) -> List[Any]:
    """Stable sort; each record's sort value is resolved once."""
    sign = -1 if sort.direction == 'desc' else 1
    decorated = [(_sort_value(record, sort.field), record) for record in records]

    def cmp(left, right):
        return sign * _compare_values(left[0], right[0])

    decorated.sort(key=cmp_to_key(cmp))
    return [record for _, record in decorated]
