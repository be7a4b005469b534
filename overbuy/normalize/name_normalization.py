"""Product-name normalization helpers for duplicate comparisons."""

from __future__ import annotations

import re

UNIT_WORDS: frozenset[str] = frozenset(
    {"kg", "g", "ml", "l", "pcs", "pack", "bottle", "can", "box"},
)

_DISALLOWED_CHARACTER_PATTERN = re.compile(r"[^a-z0-9\s]")


def normalize_product_name(name: str | None) -> str:
    """Normalize one product name into its canonical comparison form."""
    if not name:
        return ""

    stripped = _DISALLOWED_CHARACTER_PATTERN.sub("", name.lower())
    tokens = [token for token in stripped.split() if token not in UNIT_WORDS]
    return " ".join(tokens)


def names_equal_loosely(left: str | None, right: str | None) -> bool:
    """Compare raw names case-insensitively after trimming outer whitespace."""
    return (left or "").strip().lower() == (right or "").strip().lower()
