from __future__ import annotations


class ParseError(ValueError):
    """The loaded text is not valid JSON, or its top level is not an object or an array."""
