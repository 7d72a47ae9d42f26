"""Food name normalization."""

import re

_WHITESPACE = re.compile(r"\s+")


def normalize_name(raw: str) -> str:
    """Return the canonical lookup key for a free-text food name."""
    return _WHITESPACE.sub(" ", raw.strip().lower())
