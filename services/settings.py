"""Parsing of raw config values (environment strings or mapping entries)."""
from __future__ import annotations

TRUE_VALUES = ("1", "true", "yes", "on")


def parse_int(value, default: int) -> int:
    """int(value), or default when missing/unparsable/non-positive."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def parse_bool(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES
