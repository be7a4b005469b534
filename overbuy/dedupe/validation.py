"""Boundary validation for detection inputs and comparison settings."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, cast

from .records import (
    DEFAULT_COMPARISON_SETTINGS,
    ComparisonOption,
    ComparisonSettings,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime

    from .records import ListRecord, ListSnapshot, ProductRecord

_SETTING_KEY_ALIASES: dict[str, tuple[str, str]] = {
    "option": ("option", "option"),
    "custom_days": ("customDays", "custom_days"),
    "include_completed": ("includeCompleted", "include_completed"),
    "similarity_threshold": ("similarityThreshold", "similarity_threshold"),
    "check_different_stores": ("checkDifferentStores", "check_different_stores"),
}


class DetectionInputError(ValueError):
    """Raised when detection inputs or settings are malformed."""

    @classmethod
    def for_negative_quantity(
        cls,
        *,
        product_name: str,
        quantity: float,
    ) -> DetectionInputError:
        """Build error for product quantities below zero or non-finite."""
        message = (
            f"Invalid quantity for product {product_name!r}: {quantity!r}. "
            "Quantity must be a finite number >= 0."
        )
        return cls(message)

    @classmethod
    def for_threshold(cls, threshold: object) -> DetectionInputError:
        """Build error for similarity thresholds outside the unit interval."""
        message = (
            f"Invalid similarity threshold: {threshold!r}. "
            "Expected a finite number between 0 and 1."
        )
        return cls(message)

    @classmethod
    def for_custom_days(cls, custom_days: object) -> DetectionInputError:
        """Build error for non-positive custom comparison windows."""
        message = (
            f"Invalid custom days: {custom_days!r}. "
            "Custom comparison windows must be a positive number of days."
        )
        return cls(message)

    @classmethod
    def for_invalid_option(cls, option: object) -> DetectionInputError:
        """Build error for unknown comparison options."""
        allowed = ", ".join(member.value for member in ComparisonOption)
        message = f"Invalid comparison option: {option!r}. Allowed values: {allowed}."
        return cls(message)

    @classmethod
    def for_field_type(
        cls,
        *,
        field: str,
        expected: str,
        value: object,
    ) -> DetectionInputError:
        """Build error for settings fields carrying the wrong JSON type."""
        message = (
            f"Invalid {field}: expected {expected}, got {type(value).__name__}."
        )
        return cls(message)

    @classmethod
    def for_naive_timestamp(cls, *, subject: str) -> DetectionInputError:
        """Build error for timestamps without timezone information."""
        message = f"Timestamp for {subject} must be timezone-aware."
        return cls(message)


def validate_comparison_settings(settings: ComparisonSettings) -> ComparisonSettings:
    """Reject settings the engine cannot evaluate; return them unchanged."""
    threshold = settings.similarity_threshold
    if (
        isinstance(threshold, bool)
        or not isinstance(threshold, int | float)
        or not math.isfinite(threshold)
        or not 0.0 <= threshold <= 1.0
    ):
        raise DetectionInputError.for_threshold(threshold)

    if settings.option not in set(ComparisonOption):
        raise DetectionInputError.for_invalid_option(settings.option)

    custom_days = settings.custom_days
    if settings.option == ComparisonOption.CUSTOM and custom_days is not None:
        if isinstance(custom_days, bool) or not isinstance(custom_days, int):
            raise DetectionInputError.for_custom_days(custom_days)
        if custom_days <= 0:
            raise DetectionInputError.for_custom_days(custom_days)

    return settings


def validate_products(products: Iterable[ProductRecord]) -> None:
    """Reject product rows with negative quantities or naive timestamps."""
    for product in products:
        quantity = product.quantity
        if not math.isfinite(quantity) or quantity < 0:
            raise DetectionInputError.for_negative_quantity(
                product_name=product.name,
                quantity=quantity,
            )
        _require_aware(product.created_at, subject=f"product {product.name!r}")


def validate_lists(lists: Iterable[ListSnapshot | ListRecord]) -> None:
    """Reject list metadata with naive timestamps and invalid nested products."""
    for list_item in lists:
        _require_aware(list_item.created_at, subject=f"list {list_item.list_id!r}")
        products = cast("tuple[ProductRecord, ...]", getattr(list_item, "products", ()))
        validate_products(products)


def validate_reference_time(now: datetime | None) -> None:
    """Reject a naive evaluation time; None means the current UTC time."""
    if now is not None:
        _require_aware(now, subject="reference time `now`")


def coerce_comparison_settings(
    payload: Mapping[str, object],
    *,
    base: ComparisonSettings = DEFAULT_COMPARISON_SETTINGS,
) -> ComparisonSettings:
    """Build validated settings from a JSON-like mapping layered over `base`."""
    option = base.option
    option_obj = _lookup(payload, "option")
    if option_obj is not None:
        option = _coerce_option(option_obj)

    custom_days = base.custom_days
    if _has(payload, "custom_days"):
        custom_days = _coerce_custom_days(_lookup(payload, "custom_days"))

    include_completed = base.include_completed
    include_completed_obj = _lookup(payload, "include_completed")
    if include_completed_obj is not None:
        include_completed = _coerce_bool(
            include_completed_obj,
            field="include_completed",
        )

    threshold = base.similarity_threshold
    threshold_obj = _lookup(payload, "similarity_threshold")
    if threshold_obj is not None:
        if isinstance(threshold_obj, bool) or not isinstance(threshold_obj, int | float):
            raise DetectionInputError.for_threshold(threshold_obj)
        threshold = float(threshold_obj)

    check_different_stores = base.check_different_stores
    stores_obj = _lookup(payload, "check_different_stores")
    if stores_obj is not None:
        check_different_stores = _coerce_bool(
            stores_obj,
            field="check_different_stores",
        )

    return validate_comparison_settings(
        ComparisonSettings(
            option=option,
            custom_days=custom_days,
            include_completed=include_completed,
            similarity_threshold=threshold,
            check_different_stores=check_different_stores,
        ),
    )


def comparison_settings_to_payload(settings: ComparisonSettings) -> dict[str, object]:
    """Serialize settings into the camelCase payload used for storage."""
    return {
        "option": settings.option.value,
        "customDays": settings.custom_days,
        "includeCompleted": settings.include_completed,
        "similarityThreshold": settings.similarity_threshold,
        "checkDifferentStores": settings.check_different_stores,
    }


def _require_aware(value: datetime, *, subject: str) -> None:
    if value.tzinfo is None or value.utcoffset() is None:
        raise DetectionInputError.for_naive_timestamp(subject=subject)


def _has(payload: Mapping[str, object], field: str) -> bool:
    return any(alias in payload for alias in _SETTING_KEY_ALIASES[field])


def _lookup(payload: Mapping[str, object], field: str) -> object:
    for alias in _SETTING_KEY_ALIASES[field]:
        if alias in payload:
            return payload[alias]
    return None


def _coerce_option(value: object) -> ComparisonOption:
    if not isinstance(value, str):
        raise DetectionInputError.for_invalid_option(value)
    try:
        return ComparisonOption(value)
    except ValueError as exc:
        raise DetectionInputError.for_invalid_option(value) from exc


def _coerce_custom_days(value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise DetectionInputError.for_field_type(
            field="custom_days",
            expected="int",
            value=value,
        )
    return value


def _coerce_bool(value: object, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise DetectionInputError.for_field_type(field=field, expected="bool", value=value)
    return value
