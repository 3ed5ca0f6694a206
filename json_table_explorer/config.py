from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "JSON_EXPLORER_"


class Settings(BaseModel):
    """Explorer settings, overridable through ``JSON_EXPLORER_*`` variables."""

    model_config = ConfigDict(frozen=True)

    row_height: int = Field(default=36, gt=0)
    overscan: int = Field(default=20, ge=0)
    viewport_height: int = Field(default=720, ge=0)
    debounce_ms: int = Field(default=200, ge=0)
    chunk_size: int = Field(default=5000, gt=0)
    column_store: str = "~/.json_table_explorer/hidden_columns.json"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read ``JSON_EXPLORER_<FIELD>`` overrides, e.g. ``JSON_EXPLORER_ROW_HEIGHT=40``.

        Raises pydantic's ValidationError (a ValueError) for values that do
        not fit their field.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls.model_validate(values)
