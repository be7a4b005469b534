"""Cross-list matching of current products against a comparison window."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from overbuy.normalize import normalize_product_name

from .records import MatchEntry, ProductMatches
from .similarity import similarity

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .records import ComparisonSettings, ListSnapshot, ProductRecord

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True, slots=True)
class _WindowCandidate:
    """Window product paired with its owning list and canonical name."""

    snapshot: ListSnapshot
    product: ProductRecord
    normalized_name: str


def find_matches(
    current_products: Iterable[ProductRecord],
    window: Sequence[ListSnapshot],
    current_list_id: str,
    settings: ComparisonSettings,
    *,
    now: datetime | None = None,
) -> list[ProductMatches]:
    """Collect above-threshold window matches for each current product.

    Output keeps current-product order and omits products without matches.
    """
    reference_time = datetime.now(UTC) if now is None else now
    candidates = [
        _WindowCandidate(
            snapshot=snapshot,
            product=product,
            normalized_name=normalize_product_name(product.name),
        )
        for snapshot in window
        for product in snapshot.products
    ]

    results: list[ProductMatches] = []
    for current in current_products:
        grouped = _match_one(
            current=current,
            candidates=candidates,
            current_list_id=current_list_id,
            settings=settings,
            now=reference_time,
        )
        if grouped is not None:
            results.append(grouped)
    return results


def days_since(created_at: datetime, *, now: datetime) -> int:
    """Return whole days elapsed since `created_at`, never negative."""
    return max(0, (now - created_at) // _ONE_DAY)


def _match_one(
    *,
    current: ProductRecord,
    candidates: list[_WindowCandidate],
    current_list_id: str,
    settings: ComparisonSettings,
    now: datetime,
) -> ProductMatches | None:
    current_name = normalize_product_name(current.name)
    matches: list[MatchEntry] = []
    is_different_store = False

    for candidate in candidates:
        existing = candidate.product
        list_id = candidate.snapshot.list_id
        if _is_same_instance(current=current, candidate=existing, list_id=list_id):
            continue
        if not settings.include_completed and existing.is_purchased:
            continue
        if similarity(current_name, candidate.normalized_name) < settings.similarity_threshold:
            continue

        if (
            settings.check_different_stores
            and list_id == current_list_id
            and _stores_differ(current.selected_store, existing.selected_store)
        ):
            is_different_store = True

        matches.append(
            MatchEntry(
                list_id=list_id,
                list_name=candidate.snapshot.name,
                quantity=existing.quantity,
                units=existing.units,
                is_purchased=existing.is_purchased,
                days_ago=days_since(candidate.snapshot.created_at, now=now),
                selected_store=existing.selected_store,
                product_id=existing.product_id,
            ),
        )

    if not matches:
        return None
    return ProductMatches(
        product=current,
        matches=tuple(matches),
        is_different_store=is_different_store,
    )


def _is_same_instance(
    *,
    current: ProductRecord,
    candidate: ProductRecord,
    list_id: str,
) -> bool:
    if list_id != current.list_id:
        return False
    if current.product_id is not None and candidate.product_id is not None:
        return current.product_id == candidate.product_id
    return (
        current.created_at == candidate.created_at
        and current.name == candidate.name
        and current.quantity == candidate.quantity
    )


def _stores_differ(left: str | None, right: str | None) -> bool:
    left_store = (left or "").strip()
    right_store = (right or "").strip()
    return bool(left_store) and bool(right_store) and left_store != right_store
