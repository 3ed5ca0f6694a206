from __future__ import annotations

import json
import math
import re
from typing import Any, Optional

_FLOAT_PREFIX = re.compile(r'[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')
_INT_PREFIX = re.compile(r'[+-]?\d+')


def value_to_text(value: Any) -> str:
    """Stringify a JSON value the way it is shown in a table cell.

    Examples:
        >>> value_to_text(True)
        'true'
        >>> value_to_text(3.0)
        '3'
        >>> value_to_text({"a": 1})
        '{"a":1}'
    """
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (int, str)):
        return str(value)
    try:
        return json.dumps(value, ensure_ascii=False, separators=(',', ':'))
    except (TypeError, ValueError):
        return str(value)


def parse_float(text: Any) -> Optional[float]:
    """Parse the leading number of a string, ignoring trailing garbage.

    Returns None when the string does not start with a number, so
    ``"30px"`` parses as 30.0 and ``"x"`` does not parse at all.
    """
    if text is None:
        return None
    if not isinstance(text, str):
        text = value_to_text(text)
    match = _FLOAT_PREFIX.match(text.strip())
    if not match:
        return None
    token = match.group(0)
    if token.lstrip('+-') == 'Infinity':
        return -math.inf if token.startswith('-') else math.inf
    return float(token)


def parse_int(text: Any) -> Optional[int]:
    if text is None:
        return None
    if not isinstance(text, str):
        text = value_to_text(text)
    match = _INT_PREFIX.match(text.strip())
    if not match:
        return None
    return int(match.group(0))


def parse_finite(text: Any) -> Optional[float]:
    number = parse_float(text)
    if number is None or not math.isfinite(number):
        return None
    return number
