"""Summary statistics over detection results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .records import Confidence, DuplicateStats, SuggestedAction

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .records import DuplicateMatch


def aggregate(duplicates: Sequence[DuplicateMatch]) -> DuplicateStats:
    """Count results by confidence, suggested action and store split."""
    return DuplicateStats(
        total_duplicates=len(duplicates),
        high_confidence=sum(1 for d in duplicates if d.confidence == Confidence.HIGH),
        suggested_skips=sum(
            1 for d in duplicates if d.suggested_action == SuggestedAction.SKIP
        ),
        suggested_reductions=sum(
            1 for d in duplicates if d.suggested_action == SuggestedAction.REDUCE
        ),
        different_stores=sum(1 for d in duplicates if d.is_different_store),
    )
