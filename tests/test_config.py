"""Tests for environment configuration."""

import pytest
from pydantic import ValidationError

from json_table_explorer.config import Settings


def test_defaults():
    settings = Settings.from_env({})
    assert settings.row_height == 36
    assert settings.overscan == 20
    assert settings.debounce_seconds == 0.2


def test_env_overrides():
    settings = Settings.from_env({
        "JSON_EXPLORER_ROW_HEIGHT": "40",
        "JSON_EXPLORER_LOG_LEVEL": "debug",
        "JSON_EXPLORER_COLUMN_STORE": "/tmp/cols.json",
        "JSON_EXPLORER_OVERSCAN": "",
    })
    assert settings.row_height == 40
    assert settings.overscan == 20
    assert settings.log_level == "DEBUG"
    assert settings.column_store == "/tmp/cols.json"


@pytest.mark.parametrize("name,raw", [
    ("JSON_EXPLORER_OVERSCAN", "lots"),
    ("JSON_EXPLORER_ROW_HEIGHT", "0"),
    ("JSON_EXPLORER_CHUNK_SIZE", "-5"),
    ("JSON_EXPLORER_LOG_LEVEL", "chatty"),
])
def test_invalid_values_are_rejected(name, raw):
    with pytest.raises(ValidationError):
        Settings.from_env({name: raw})


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        Settings.from_env({"JSON_EXPLORER_DEBOUNCE_MS": "soon"})


def test_settings_are_frozen():
    settings = Settings()
    with pytest.raises(ValidationError):
        settings.row_height = 10
