"""Tests for converting raw list-store rows into snapshots."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from overbuy.dedupe import (
    ProductRecord,
    check_same_list_different_store,
    detect_duplicates,
)
from overbuy.snapshot import (
    SnapshotExtractionError,
    extract_list_snapshots,
    split_current_list,
)

NOW = datetime.now(UTC)


def test_values_and_product_tables_are_extracted() -> None:
    """Nested `values` metadata and product tables become records."""
    raw = {
        "values": {
            "listId": "weekly",
            "name": "Weekly shop",
            "createdAt": "2024-03-01T10:00:00Z",
        },
        "tables": {
            "products": {
                "p1": {
                    "name": "Milk",
                    "quantity": 2,
                    "units": "l",
                    "isPurchased": True,
                    "createdAt": "2024-03-01T10:05:00+00:00",
                    "selectedStore": "Corner Shop",
                },
            },
        },
    }

    snapshots = extract_list_snapshots([raw], now=NOW)

    snapshot = snapshots[0]
    if snapshot.list_id != "weekly" or snapshot.name != "Weekly shop":
        raise AssertionError
    if snapshot.created_at != datetime(2024, 3, 1, 10, 0, tzinfo=UTC):
        raise AssertionError
    product = snapshot.products[0]
    if (product.product_id, product.name, product.quantity) != ("p1", "Milk", 2.0):
        raise AssertionError
    if not product.is_purchased or product.selected_store != "Corner Shop":
        raise AssertionError
    if (product.list_id, product.list_name) != ("weekly", "Weekly shop"):
        raise AssertionError


def test_top_level_keys_and_defaults_are_used() -> None:
    """Flat rows work, and missing product fields take defaults."""
    raw = {
        "listId": "flat",
        "name": "Flat",
        "tables": {"products": {"p9": {"name": "Eggs", "selectedStore": "  "}}},
    }

    snapshot = extract_list_snapshots([raw], now=NOW)[0]

    if snapshot.created_at != NOW:
        raise AssertionError
    product = snapshot.products[0]
    if product.quantity != 0.0 or product.units != "" or product.is_purchased:
        raise AssertionError
    if product.created_at != NOW or product.selected_store is not None:
        raise AssertionError


def test_unnamed_products_and_unidentified_lists_are_dropped() -> None:
    """Rows without names or ids never reach the engine."""
    raw_lists = [
        {"values": {"listId": "", "name": "No id"}},
        {"values": {"listId": "no-name"}},
        {
            "values": {"listId": "ok", "name": "Ok"},
            "tables": {"products": {"a": {"name": ""}, "b": {"name": "   "}}},
        },
    ]

    snapshots = extract_list_snapshots(raw_lists, now=NOW)

    if [snapshot.list_id for snapshot in snapshots] != ["ok"]:
        raise AssertionError
    if snapshots[0].products != ():
        raise AssertionError


def test_naive_timestamps_are_taken_as_utc() -> None:
    """Timestamps without offsets are interpreted in UTC."""
    raw = {"values": {"listId": "n", "name": "Naive", "createdAt": "2024-05-05T08:30:00"}}

    snapshot = extract_list_snapshots([raw], now=NOW)[0]

    if snapshot.created_at != datetime(2024, 5, 5, 8, 30, tzinfo=UTC):
        raise AssertionError


@pytest.mark.parametrize(
    ("products", "message"),
    [
        ({"p1": {"name": "Milk", "quantity": "two"}}, "Invalid quantity in list 'Bad'"),
        ({"p1": {"name": "Milk", "isPurchased": "no"}}, "Invalid isPurchased in list 'Bad'"),
        ({"p1": {"name": "Milk", "createdAt": "yesterday"}}, "Invalid createdAt of product"),
        ({"p1": "Milk"}, "expected a mapping row"),
    ],
)
def test_malformed_product_rows_raise(
    products: dict[str, object],
    message: str,
) -> None:
    """Malformed rows fail with list-localized context."""
    raw = {"values": {"listId": "bad", "name": "Bad"}, "tables": {"products": products}}

    with pytest.raises(SnapshotExtractionError, match=message):
        _ = extract_list_snapshots([raw], now=NOW)


def test_split_current_list_returns_current_products() -> None:
    """The current list's products are returned alongside its snapshot."""
    raw_lists = [
        {
            "values": {
                "listId": "old",
                "name": "Old",
                "createdAt": (NOW - timedelta(days=3)).isoformat(),
            },
        },
        {
            "values": {"listId": "cur", "name": "Current"},
            "tables": {"products": {"p1": {"name": "Bread"}}},
        },
    ]
    snapshots = extract_list_snapshots(raw_lists, now=NOW)

    products, current = split_current_list(snapshots, "cur")
    missing_products, missing = split_current_list(snapshots, "nope")

    if [product.name for product in products] != ["Bread"]:
        raise AssertionError
    if current is None or current.list_id != "cur":
        raise AssertionError
    if missing_products != () or missing is not None:
        raise AssertionError


def test_names_without_canonical_form_are_dropped() -> None:
    """Unit-only or punctuation-only names are removed before detection."""
    raw = {
        "values": {"listId": "cur", "name": "Current"},
        "tables": {
            "products": {
                "p1": {"name": "Pack", "selectedStore": "A"},
                "p2": {"name": "Box", "selectedStore": "B"},
                "p3": {"name": "!!!"},
                "p4": {"name": "Milk 1 l"},
            },
        },
    }

    snapshots = extract_list_snapshots([raw], now=NOW)
    products, _ = split_current_list(snapshots, "cur")

    if [product.product_id for product in products] != ["p4"]:
        raise AssertionError
    if detect_duplicates(products, snapshots, "cur", now=NOW) != []:
        raise AssertionError


def test_store_precheck_ignores_names_without_canonical_form() -> None:
    """A unit-only name never matches another unit-only name at another store."""
    raw = {
        "values": {"listId": "cur", "name": "Current"},
        "tables": {"products": {"p1": {"name": "Bread", "selectedStore": "A"}}},
    }
    products, _ = split_current_list(extract_list_snapshots([raw], now=NOW), "cur")
    pack = ProductRecord(
        name="Pack",
        quantity=1,
        units="",
        list_id="cur",
        list_name="Current",
        is_purchased=False,
        created_at=NOW,
        product_id="p2",
        selected_store="A",
    )

    cases = [("Can", [*products, pack]), ("Can", [pack]), ("!!!", [pack])]
    for name, existing in cases:
        result = check_same_list_different_store(name, "C", existing, 0.8)
        if result.found or result.existing_product is not None:
            raise AssertionError
