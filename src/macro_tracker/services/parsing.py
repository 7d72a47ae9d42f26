"""Lenient parsing helpers for request payload values."""

import math


def parse_number(value: object) -> float | None:
    """Return a finite float for numbers or numeric strings, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        result = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            result = float(value)
        except ValueError:
            return None
    else:
        return None
    return result if math.isfinite(result) else None


def optional_text(value: object) -> str | None:
    """Return stripped text, or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


_TRUE_TEXT = frozenset({"true", "1", "yes", "on"})
_FALSE_TEXT = frozenset({"false", "0", "no", "off", ""})


def parse_bool(value: object, default: bool = False) -> bool | None:
    """Return a bool for bools, 0/1 and common true/false strings, else None."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False
    return None
