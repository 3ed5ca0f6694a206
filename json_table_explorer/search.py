from __future__ import annotations

import json
from typing import Any, List, Sequence


def search_text(record: Any) -> str:
    """Lowercased compact JSON of a record, the haystack for full-text search."""
    try:
        text = json.dumps(record, ensure_ascii=False, allow_nan=False, separators=(',', ':'))
    except (TypeError, ValueError):
        text = str(record)
    return text.lower()


class SearchCache:
    """Per-row search text for one dataset, keyed by row position.

    The cache is built once per loaded dataset and is never patched; a new
    dataset needs a new cache.
    """

    def __init__(self, dataset: Sequence[Any], texts: List[str]):
        self._dataset = dataset
        self._texts = texts

    @classmethod
    def build(cls, dataset: Sequence[Any]) -> 'SearchCache':
        return cls(dataset, [search_text(record) for record in dataset])

    @classmethod
    def empty(cls) -> 'SearchCache':
        return cls([], [])

    def __len__(self) -> int:
        return len(self._texts)

    def covers(self, dataset: Sequence[Any]) -> bool:
        return dataset is self._dataset

    def text(self, index: int) -> str:
        return self._texts[index]

    def matches(self, index: int, query: str) -> bool:
        if not query:
            return True
        return query.lower() in self._texts[index]
