from __future__ import annotations

import json
import math
import os
import tempfile
from typing import Any, List, Optional, Sequence

from .errors import ParseError


def _reject_constant(name: str):
    raise ParseError(f"Invalid JSON: {name} is not a JSON value.")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ParseError(f"Invalid JSON: number {text} is out of range.")
    return value


def parse_dataset(text: Any) -> List[Any]:
    """Parse raw JSON text into a dataset.

    A top-level array is the dataset; a top-level object becomes a
    one-record dataset. Anything else raises ParseError.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise ParseError(f"File is not UTF-8 text: {exc}") from exc
    if text is None or not str(text).strip():
        raise ParseError("No JSON content provided.")

    try:
        parsed = json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
    except ParseError:
        raise
    except ValueError as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc

    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        return [parsed]
    raise ParseError("Top-level JSON value must be an object or an array.")


def read_json_text(file_obj) -> str:
    """Read raw text from an uploaded file or file path."""
    if file_obj is None:
        raise ParseError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
    else:
        path = file_obj.name if hasattr(file_obj, 'name') else file_obj
        with open(path, 'rb') as f:
            content = f.read()

    if isinstance(content, bytes):
        try:
            content = content.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise ParseError(f"File is not UTF-8 text: {exc}") from exc
    return content


def export_records(records: Sequence[Any]) -> str:
    """Pretty-print records as a JSON array with 2-space indentation."""
    return json.dumps(list(records), indent=2, ensure_ascii=False, allow_nan=False)


def write_export_file(records: Sequence[Any], file_name: str, directory: Optional[str] = None) -> str:
    if not file_name or not file_name.strip():
        file_name = "filtered"
    file_name = os.path.basename(file_name.strip())
    if not file_name.lower().endswith('.json'):
        file_name += '.json'

    path = os.path.join(directory or tempfile.gettempdir(), file_name)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(export_records(records))
    return path
