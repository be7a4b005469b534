"""Convert raw list-store rows into immutable list snapshots."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, cast

from overbuy.dedupe import ListRecord, ListSnapshot, ProductRecord
from overbuy.normalize import normalize_product_name

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

RawRow = Mapping[str, object]


class SnapshotExtractionError(ValueError):
    """Raised when raw list-store rows cannot be converted to records."""

    @classmethod
    def for_field(
        cls,
        *,
        list_name: str,
        field: str,
        details: str,
    ) -> SnapshotExtractionError:
        """Build error with list-localized context for one malformed field."""
        message = f"Invalid {field} in list {list_name!r}: {details}"
        return cls(message)


def extract_list_snapshots(
    raw_lists: Iterable[RawRow],
    *,
    now: datetime | None = None,
) -> list[ListSnapshot]:
    """Build snapshots for every identifiable list, dropping nameless products."""
    fallback_time = datetime.now(UTC) if now is None else now
    snapshots: list[ListSnapshot] = []
    for raw in raw_lists:
        snapshot = _extract_list(raw=raw, fallback_time=fallback_time)
        if snapshot is not None:
            snapshots.append(snapshot)
    return snapshots


def split_current_list(
    snapshots: Sequence[ListSnapshot],
    current_list_id: str,
) -> tuple[tuple[ProductRecord, ...], ListSnapshot | None]:
    """Return current-list products together with the current snapshot."""
    for snapshot in snapshots:
        if snapshot.list_id == current_list_id:
            return snapshot.products, snapshot
    return (), None


def parse_timestamp(value: object, *, list_name: str, field: str) -> datetime:
    """Parse an ISO-8601 string or datetime into an aware UTC-based value."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise SnapshotExtractionError.for_field(
                list_name=list_name,
                field=field,
                details=str(exc),
            ) from exc
    else:
        raise SnapshotExtractionError.for_field(
            list_name=list_name,
            field=field,
            details=f"expected ISO-8601 text, got {type(value).__name__}",
        )
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def _extract_list(*, raw: RawRow, fallback_time: datetime) -> ListSnapshot | None:
    values = _mapping_or_empty(raw.get("values"))
    list_id = _text(values.get("listId")) or _text(raw.get("listId"))
    name = _text(values.get("name")) or _text(raw.get("name"))
    if not list_id or not name:
        return None

    created_raw = values.get("createdAt") or raw.get("createdAt")
    created_at = (
        fallback_time
        if not created_raw
        else parse_timestamp(created_raw, list_name=name, field="createdAt")
    )
    list_data = ListRecord(list_id=list_id, name=name, created_at=created_at)

    tables = _mapping_or_empty(raw.get("tables"))
    product_rows = tables.get("products")
    if product_rows is None:
        return ListSnapshot(list_data=list_data)
    if not isinstance(product_rows, Mapping):
        raise SnapshotExtractionError.for_field(
            list_name=name,
            field="products",
            details="expected a mapping of product id to product row",
        )

    rows = cast("Mapping[object, object]", product_rows)
    products: list[ProductRecord] = []
    for product_id, row in rows.items():
        product = _extract_product(
            product_id=str(product_id),
            row=row,
            list_data=list_data,
            fallback_time=fallback_time,
        )
        if product is not None:
            products.append(product)
    return ListSnapshot(list_data=list_data, products=tuple(products))


def _extract_product(
    *,
    product_id: str,
    row: object,
    list_data: ListRecord,
    fallback_time: datetime,
) -> ProductRecord | None:
    if not isinstance(row, Mapping):
        raise SnapshotExtractionError.for_field(
            list_name=list_data.name,
            field=f"product {product_id!r}",
            details="expected a mapping row",
        )
    data = cast("Mapping[str, object]", row)

    name = _text(data.get("name"))
    # Names with an empty canonical form are not comparable.
    if not normalize_product_name(name):
        return None

    created_raw = data.get("createdAt")
    created_at = (
        fallback_time
        if not created_raw
        else parse_timestamp(
            created_raw,
            list_name=list_data.name,
            field=f"createdAt of product {product_id!r}",
        )
    )
    store = _text(data.get("selectedStore")).strip()

    return ProductRecord(
        name=name,
        quantity=_quantity(data.get("quantity"), list_name=list_data.name),
        units=_text(data.get("units")),
        list_id=list_data.list_id,
        list_name=list_data.name,
        is_purchased=_flag(data.get("isPurchased"), list_name=list_data.name),
        created_at=created_at,
        product_id=product_id,
        selected_store=store or None,
    )


def _quantity(value: object, *, list_name: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise SnapshotExtractionError.for_field(
            list_name=list_name,
            field="quantity",
            details=f"expected a number, got {type(value).__name__}",
        )
    return float(value)


def _flag(value: object, *, list_name: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise SnapshotExtractionError.for_field(
            list_name=list_name,
            field="isPurchased",
            details=f"expected a boolean, got {type(value).__name__}",
        )
    return value


def _text(value: object) -> str:
    if isinstance(value, str):
        return value
    return ""


def _mapping_or_empty(value: object) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        return cast("Mapping[str, object]", value)
    return {}
