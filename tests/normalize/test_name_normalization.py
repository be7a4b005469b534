"""Tests for product-name normalization behavior."""

from __future__ import annotations

import pytest

from overbuy.normalize import names_equal_loosely, normalize_product_name


def test_punctuation_is_stripped_and_case_folded() -> None:
    """Non-alphanumeric characters are removed after lowercasing."""
    result = normalize_product_name("Milk (2%)!  Organic")

    if result != "milk 2 organic":
        raise AssertionError


def test_standalone_unit_words_are_removed() -> None:
    """Unit words are dropped only when they form a whole token."""
    result = normalize_product_name("Coca-Cola Bottle 1 L Pack")

    if result != "cocacola 1":
        raise AssertionError


def test_units_glued_to_numbers_are_kept() -> None:
    """Quantities such as `500g` are not whole-word unit tokens."""
    result = normalize_product_name("Basmati Rice 500g BOX")

    if result != "basmati rice 500g":
        raise AssertionError


def test_whitespace_runs_collapse_and_trim() -> None:
    """Tabs, newlines and repeated spaces collapse to single spaces."""
    result = normalize_product_name("  green\t\tapples \n ")

    if result != "green apples":
        raise AssertionError


@pytest.mark.parametrize("raw", ["", None, "!!!", "kg g ml"])
def test_degenerate_inputs_normalize_to_empty(raw: str | None) -> None:
    """Empty, punctuation-only and unit-only inputs yield an empty name."""
    if normalize_product_name(raw) != "":
        raise AssertionError


@pytest.mark.parametrize(
    "raw",
    [
        "Milk",
        "  Free-Range EGGS (12 pcs)  ",
        "Can of Tomatoes, chopped",
        "Crème Brûlée",
        "l kg box-set",
        "Ünïcödé spaces here",
    ],
)
def test_normalization_is_idempotent(raw: str) -> None:
    """Normalizing twice yields the same canonical name as normalizing once."""
    once = normalize_product_name(raw)
    if normalize_product_name(once) != once:
        raise AssertionError


def test_loose_name_equality_ignores_case_and_outer_space() -> None:
    """Loose comparison trims and lowercases but keeps inner punctuation."""
    if not names_equal_loosely("  Milk ", "milk"):
        raise AssertionError
    if names_equal_loosely("Milk!", "milk"):
        raise AssertionError
