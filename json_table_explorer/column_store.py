from __future__ import annotations

import json
import logging
import os
from typing import Iterable, Optional, Protocol, Set

logger = logging.getLogger(__name__)


class ColumnVisibilityStore(Protocol):
    """Key-value persistence for the set of hidden column paths."""

    def load(self) -> Set[str]:
        ...

    def save(self, columns: Iterable[str]) -> None:
        ...


class MemoryColumnStore:
    def __init__(self, columns: Optional[Iterable[str]] = None):
        self._columns: Set[str] = set(columns or ())

    def load(self) -> Set[str]:
        return set(self._columns)

    def save(self, columns: Iterable[str]) -> None:
        self._columns = set(columns)


class JsonFileColumnStore:
    """Hidden columns kept as a JSON array in a file.

    A missing or unreadable file loads as "nothing hidden".
    """

    def __init__(self, path: str):
        self.path = os.path.expanduser(path)

    def load(self) -> Set[str]:
        if not os.path.exists(self.path):
            return set()
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable column store %s: %s", self.path, exc)
            return set()
        if not isinstance(data, list):
            return set()
        return {str(item) for item in data}

    def save(self, columns: Iterable[str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(sorted(columns), f)
