"""Public entry points of the duplicate/overbuying detection engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

from overbuy.normalize import names_equal_loosely, normalize_product_name

from .classifier import classify, sort_duplicates
from .matcher import find_matches
from .records import (
    DEFAULT_COMPARISON_SETTINGS,
    DifferentStoreCheck,
    DuplicateMatch,
    PendingDuplicate,
)
from .similarity import meets_threshold
from .stats import aggregate
from .validation import (
    DetectionInputError,
    validate_comparison_settings,
    validate_lists,
    validate_products,
    validate_reference_time,
)
from .window_selection import select_window

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from .records import (
        ComparisonSettings,
        DuplicateStats,
        ListSnapshot,
        ProductRecord,
    )


def detect_duplicates(
    current_products: Sequence[ProductRecord],
    all_lists_with_products: Sequence[ListSnapshot],
    current_list_id: str,
    settings: ComparisonSettings | None = None,
    *,
    now: datetime | None = None,
) -> list[DuplicateMatch]:
    """Run window selection, matching and classification for one list."""
    effective = DEFAULT_COMPARISON_SETTINGS if settings is None else settings
    validate_comparison_settings(effective)
    validate_products(current_products)
    validate_lists(all_lists_with_products)
    validate_reference_time(now)

    window = select_window(
        all_lists_with_products,
        current_list_id,
        effective,
        now=now,
    )
    grouped = find_matches(
        current_products,
        window,
        current_list_id,
        effective,
        now=now,
    )

    duplicates: list[DuplicateMatch] = []
    for group in grouped:
        product = group.product
        verdict = classify(
            group.matches,
            group.is_different_store,
            current_list_id,
        )
        duplicates.append(
            DuplicateMatch(
                product_name=product.name,
                current_quantity=product.quantity,
                current_units=product.units,
                matches=group.matches,
                suggested_action=verdict.suggested_action,
                confidence=verdict.confidence,
                is_different_store=group.is_different_store,
                current_store=product.selected_store,
            ),
        )
    return sort_duplicates(duplicates)


def get_stats(duplicates: Sequence[DuplicateMatch]) -> DuplicateStats:
    """Summarize one batch of detection results."""
    return aggregate(duplicates)


def check_same_list_different_store(
    product_name: str,
    selected_store: str | None,
    current_list_products: Sequence[ProductRecord],
    threshold: float,
) -> DifferentStoreCheck:
    """Find a similar product already listed for another store."""
    _validate_threshold(threshold)
    new_store = (selected_store or "").strip()
    normalized_name = normalize_product_name(product_name)
    if not new_store or not normalized_name:
        return DifferentStoreCheck(found=False)

    for product in current_list_products:
        existing_store = (product.selected_store or "").strip()
        if not existing_store or existing_store == new_store:
            continue
        existing_name = normalize_product_name(product.name)
        if existing_name and meets_threshold(
            left=normalized_name,
            right=existing_name,
            threshold=threshold,
        ):
            return DifferentStoreCheck(found=True, existing_product=product)
    return DifferentStoreCheck(found=False)


def check_pending_product(  # noqa: PLR0913
    product_name: str,
    quantity: float,
    units: str,
    selected_store: str | None,
    current_list_products: Sequence[ProductRecord],
    threshold: float,
) -> PendingDuplicate | None:
    """Return a duplicate prompt for a product about to be added, if any."""
    store_check = check_same_list_different_store(
        product_name,
        selected_store,
        current_list_products,
        threshold,
    )
    existing = store_check.existing_product
    if store_check.found and existing is not None:
        return _pending(
            product_name=product_name,
            quantity=quantity,
            units=units,
            selected_store=selected_store,
            existing=existing,
            is_different_store=True,
        )

    for product in current_list_products:
        if not names_equal_loosely(product.name, product_name):
            continue
        if selected_store and product.selected_store and (
            product.selected_store != selected_store
        ):
            continue
        return _pending(
            product_name=product_name,
            quantity=quantity,
            units=units,
            selected_store=selected_store,
            existing=product,
            is_different_store=False,
        )
    return None


def _pending(  # noqa: PLR0913
    *,
    product_name: str,
    quantity: float,
    units: str,
    selected_store: str | None,
    existing: ProductRecord,
    is_different_store: bool,
) -> PendingDuplicate:
    return PendingDuplicate(
        product_name=product_name,
        existing_quantity=existing.quantity,
        new_quantity=quantity,
        units=units,
        existing_store=existing.selected_store,
        new_store=selected_store,
        is_different_store=is_different_store,
    )


def _validate_threshold(threshold: float) -> None:
    if isinstance(threshold, bool) or not isinstance(threshold, int | float):
        raise DetectionInputError.for_threshold(threshold)
    if not 0.0 <= threshold <= 1.0:
        raise DetectionInputError.for_threshold(threshold)
