"""Pytest configuration and shared fixtures."""

import pytest

from json_table_explorer.column_store import MemoryColumnStore
from json_table_explorer.config import Settings
from json_table_explorer.session import ExplorerSession


@pytest.fixture
def people():
    return [
        {"name": "Alice", "age": 30, "tags": ["admin", "dev"], "address": {"city": "Berlin"}},
        {"name": "bob", "age": 25, "tags": [], "address": {"city": "Paris"}},
        {"name": "Carol", "age": "x", "tags": ["dev"], "address": None},
        {"name": "Dave", "age": 41, "orders": [{"id": 1, "total": 9.5}, {"id": 2, "total": 120}]},
    ]


@pytest.fixture
def session():
    """A session with no debounce and an in-memory column store."""
    return ExplorerSession(Settings(debounce_ms=0, chunk_size=2), MemoryColumnStore())
