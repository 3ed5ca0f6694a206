from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .paths import join_path, path_depth, split_header


def flatten(record: Dict[str, Any], prefix: str = '', out: Optional[List[str]] = None) -> List[str]:
    """Collect the leaf field paths of one record, depth-first in key order.

    Nested dicts are walked through and never emitted themselves. A list is
    walked element-wise (under the same path) when its first element is a
    dict; the remaining elements are assumed to be dicts as well and any
    that are not contribute nothing. Every other value is a leaf, including
    empty dicts, empty lists and lists of primitives.
    """
    if out is None:
        out = []

    for key, value in record.items():
        path = join_path(prefix, key)

        if isinstance(value, list) and value and isinstance(value[0], dict):
            for item in value:
                if isinstance(item, dict):
                    flatten(item, path, out)
        elif isinstance(value, dict) and value:
            flatten(value, path, out)
        else:
            out.append(path)

    return out


def detect_fields(dataset: Iterable[Any]) -> List[str]:
    """Union of ``flatten`` over the dataset, first-seen order, no duplicates."""
    fields: Dict[str, None] = {}
    for record in dataset:
        if not isinstance(record, dict):
            continue
        for path in flatten(record):
            fields.setdefault(path, None)
    return list(fields)


@dataclass(frozen=True)
class ColumnEntry:
    path: str
    prefix: str
    name: str
    depth: int

    @property
    def label(self) -> str:
        indent = '  ' * self.depth
        return f"{indent}{self.name}"


def build_column_tree(fields: Iterable[str]) -> List[ColumnEntry]:
    """Describe each column for the column picker: its parent prefix, name and nesting depth."""
    entries: List[ColumnEntry] = []
    for path in fields:
        prefix, name = split_header(path)
        entries.append(ColumnEntry(path=path, prefix=prefix, name=name, depth=path_depth(path)))
    return entries
