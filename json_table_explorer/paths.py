from __future__ import annotations

from typing import Any, List, Tuple

SEP = '.'


def join_path(prefix: str, key: Any) -> str:
    """Append one key segment to a dot path.

    Keys are joined verbatim, so a key that itself contains a dot reads
    back as several segments.
    """
    if not isinstance(key, str):
        key = str(key)
    return f"{prefix}{SEP}{key}" if prefix else key


def split_path(path: str) -> List[str]:
    if path is None:
        return []
    if not isinstance(path, str):
        path = str(path)
    return path.split(SEP)


def split_header(path: str) -> Tuple[str, str]:
    """Split a column path into its parent prefix and its own name.

    Examples:
        >>> split_header("user.address.city")
        ('user.address', 'city')
        >>> split_header("age")
        ('', 'age')
    """
    parts = split_path(path)
    if len(parts) <= 1:
        return '', path
    return SEP.join(parts[:-1]), parts[-1]


def path_depth(path: str) -> int:
    return max(0, len(split_path(path)) - 1)
