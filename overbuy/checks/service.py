"""User-initiated duplicate check over a fresh list-store snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from overbuy.config.logging import bind_check_run_id
from overbuy.dedupe import (
    ComparisonSettings,
    DuplicateMatch,
    DuplicateStats,
    coerce_comparison_settings,
    detect_duplicates,
    get_stats,
)
from overbuy.snapshot import extract_list_snapshots, split_current_list

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from overbuy.config.resolution import ConfigResolutionService
    from overbuy.snapshot.extraction import RawRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DuplicateCheckReport:
    """Everything the presentation layer needs to render one check."""

    settings: ComparisonSettings
    duplicates: tuple[DuplicateMatch, ...] = ()
    stats: DuplicateStats = field(default_factory=DuplicateStats)

    @property
    def has_duplicates(self) -> bool:
        """Return True when at least one product was flagged."""
        return bool(self.duplicates)


class DuplicateCheckService:
    """Resolve settings, snapshot the user's lists and run detection."""

    _resolution: ConfigResolutionService

    def __init__(self, *, resolution: ConfigResolutionService) -> None:
        """Create service bound to the per-user settings resolver."""
        self._resolution = resolution

    async def run(
        self,
        *,
        user_id: str,
        current_list_id: str,
        raw_lists: Iterable[RawRow],
        overrides: Mapping[str, object] | None = None,
        now: datetime | None = None,
    ) -> DuplicateCheckReport:
        """Check `current_list_id` against the user's other lists."""
        reference_time = datetime.now(UTC) if now is None else now
        with bind_check_run_id(uuid4().hex):
            settings = await self._resolution.resolve_comparison_settings(
                user_id=user_id,
            )
            if overrides:
                settings = coerce_comparison_settings(overrides, base=settings)

            snapshots = extract_list_snapshots(raw_lists, now=reference_time)
            current_products, _ = split_current_list(snapshots, current_list_id)
            if not current_products:
                logger.info(
                    "Skipped duplicate check for list without products",
                    extra={"user_id": user_id, "list_id": current_list_id},
                )
                return DuplicateCheckReport(settings=settings)

            duplicates = detect_duplicates(
                current_products,
                snapshots,
                current_list_id,
                settings,
                now=reference_time,
            )
            stats = get_stats(duplicates)
            logger.info(
                "Duplicate check complete",
                extra={
                    "user_id": user_id,
                    "list_id": current_list_id,
                    "window_option": settings.option.value,
                    "lists_in_snapshot": len(snapshots),
                    "duplicates": stats.total_duplicates,
                    "high_confidence": stats.high_confidence,
                },
            )
            return DuplicateCheckReport(
                settings=settings,
                duplicates=tuple(duplicates),
                stats=stats,
            )
