"""Input scrubbing for filter values and transport keys."""

from __future__ import annotations

import re
from typing import Any

_SNAKE_RE = re.compile(r"_([a-z0-9])")


def is_blank(value: Any) -> bool:
    """None, whitespace-only strings and empty sequences carry no filter."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return all(is_blank(v) for v in value)
    return False


def to_camel_key(key: str) -> str:
    """``is_active`` -> ``isActive``; already-camel keys pass through."""
    key = key.strip()
    if "_" not in key.strip("_"):
        return key
    return _SNAKE_RE.sub(lambda m: m.group(1).upper(), key.strip("_"))


def format_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if hasattr(value, "value") and isinstance(value.value, str):  # enums
        return value.value
    return str(value).strip() if isinstance(value, str) else str(value)
