"""Edit-distance similarity ratio for canonical product names."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def similarity(left: str, right: str) -> float:
    """Return `(max_len - distance) / max_len` for two canonical names.

    Both inputs are expected to be normalized already. Two empty strings are
    considered identical.
    """
    max_length = max(len(left), len(right))
    if max_length == 0:
        return 1.0

    distance = Levenshtein.distance(left, right)
    return (max_length - distance) / max_length


def meets_threshold(*, left: str, right: str, threshold: float) -> bool:
    """Return True when similarity reaches the inclusive threshold."""
    return similarity(left, right) >= threshold
