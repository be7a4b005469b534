"""Ordered decision table turning match groups into verdicts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .records import Classification, Confidence, SuggestedAction

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .records import DuplicateMatch, MatchEntry

RECENT_MATCH_MAX_DAYS = 7
FREQUENT_MATCH_MIN_COUNT = 3


def classify(
    matches: Sequence[MatchEntry],
    is_different_store: bool,  # noqa: FBT001
    current_list_id: str,
) -> Classification:
    """Return confidence and action from the first rule that applies."""
    if is_different_store:
        return Classification(
            confidence=Confidence.HIGH,
            suggested_action=SuggestedAction.DIFFERENT_STORE,
        )

    if any(match.list_id == current_list_id for match in matches):
        return Classification(
            confidence=Confidence.HIGH,
            suggested_action=SuggestedAction.SKIP,
        )

    recent = [match for match in matches if match.days_ago <= RECENT_MATCH_MAX_DAYS]
    if recent:
        action = (
            SuggestedAction.SKIP
            if any(not match.is_purchased for match in recent)
            else SuggestedAction.REDUCE
        )
        return Classification(confidence=Confidence.HIGH, suggested_action=action)

    if len(matches) >= FREQUENT_MATCH_MIN_COUNT:
        return Classification(
            confidence=Confidence.MEDIUM,
            suggested_action=SuggestedAction.REDUCE,
        )

    return Classification(
        confidence=Confidence.LOW,
        suggested_action=SuggestedAction.WARNING,
    )


def sort_duplicates(duplicates: Iterable[DuplicateMatch]) -> list[DuplicateMatch]:
    """Order by confidence (high first), then by match count descending."""
    return sorted(
        duplicates,
        key=lambda duplicate: (duplicate.confidence.rank, len(duplicate.matches)),
        reverse=True,
    )
