"""Normalization module for Overbuy."""

from .name_normalization import UNIT_WORDS, names_equal_loosely, normalize_product_name

__all__ = [
    "UNIT_WORDS",
    "names_equal_loosely",
    "normalize_product_name",
]
