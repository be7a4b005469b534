"""Comparison-window selection over a user's shopping lists."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol, TypeVar

from .records import ComparisonOption

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .records import ComparisonSettings

_RECENT_WINDOW_SIZES: dict[ComparisonOption, int] = {
    ComparisonOption.LAST_3: 3,
    ComparisonOption.LAST_5: 5,
}


class ListLike(Protocol):
    """Minimal list payload needed for window selection."""

    @property
    def list_id(self) -> str:
        """Return list id."""
        ...

    @property
    def created_at(self) -> datetime:
        """Return list creation time."""
        ...


ListT = TypeVar("ListT", bound=ListLike)


def select_window(
    all_lists: Iterable[ListT],
    current_list_id: str,
    settings: ComparisonSettings,
    *,
    now: datetime | None = None,
) -> list[ListT]:
    """Return the newest-first lists taking part in one comparison pass.

    The current list is always part of the window when present in `all_lists`.
    """
    ordered = sorted(all_lists, key=lambda item: item.created_at, reverse=True)
    option = ComparisonOption(settings.option)

    if option == ComparisonOption.LAST_1:
        return _select_current_and_latest_other(
            ordered=ordered,
            current_list_id=current_list_id,
        )
    if option in _RECENT_WINDOW_SIZES:
        return _select_recent(
            ordered=ordered,
            current_list_id=current_list_id,
            size=_RECENT_WINDOW_SIZES[option],
        )
    if option == ComparisonOption.CUSTOM and settings.custom_days is not None:
        return _select_within_days(
            ordered=ordered,
            current_list_id=current_list_id,
            days=settings.custom_days,
            now=datetime.now(UTC) if now is None else now,
        )
    return ordered


def _select_current_and_latest_other(
    *,
    ordered: list[ListT],
    current_list_id: str,
) -> list[ListT]:
    current = next((item for item in ordered if item.list_id == current_list_id), None)
    other = next((item for item in ordered if item.list_id != current_list_id), None)
    return [item for item in ordered if item is current or item is other]


def _select_recent(
    *,
    ordered: list[ListT],
    current_list_id: str,
    size: int,
) -> list[ListT]:
    window = ordered[:size]
    if any(item.list_id == current_list_id for item in window):
        return window

    current = next((item for item in ordered if item.list_id == current_list_id), None)
    if current is None:
        return window
    # Current list evicts the oldest entry so the window keeps its size.
    return [*window[: size - 1], current]


def _select_within_days(
    *,
    ordered: list[ListT],
    current_list_id: str,
    days: int,
    now: datetime,
) -> list[ListT]:
    cutoff = now - timedelta(days=days)
    return [
        item
        for item in ordered
        if item.created_at >= cutoff or item.list_id == current_list_id
    ]
