"""Unit tests for the edit-distance similarity ratio."""

from __future__ import annotations

import pytest

from overbuy.dedupe import meets_threshold, similarity

PAIRS: list[tuple[str, str]] = [
    ("milk", "silk"),
    ("eggs", "egg"),
    ("bread", ""),
    ("whole milk", "milk whole"),
    ("", ""),
    ("apple juice", "pineapple juice"),
]


def test_identical_strings_score_one() -> None:
    """A canonical name is always fully similar to itself."""
    if similarity("brown rice", "brown rice") != 1.0:
        raise AssertionError


def test_two_empty_strings_score_one() -> None:
    """Both-empty inputs are defined as identical."""
    if similarity("", "") != 1.0:
        raise AssertionError


def test_ratio_uses_longer_length() -> None:
    """Ratio is `(max_len - distance) / max_len`."""
    if similarity("milk", "silk") != 0.75:
        raise AssertionError
    if similarity("eggs", "egg") != 0.75:
        raise AssertionError
    if similarity("bread", "") != 0.0:
        raise AssertionError


@pytest.mark.parametrize(("left", "right"), PAIRS)
def test_similarity_is_symmetric_and_bounded(left: str, right: str) -> None:
    """Swapping inputs never changes the score, which stays in [0, 1]."""
    forward = similarity(left, right)
    if forward != similarity(right, left):
        raise AssertionError
    if not 0.0 <= forward <= 1.0:
        raise AssertionError


def test_threshold_is_inclusive() -> None:
    """A score exactly equal to the threshold counts as a match."""
    if similarity("abcde", "abcdx") != 0.8:
        raise AssertionError
    if not meets_threshold(left="abcde", right="abcdx", threshold=0.8):
        raise AssertionError
    if meets_threshold(left="abcde", right="abxyz", threshold=0.8):
        raise AssertionError
