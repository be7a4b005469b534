"""Duplicate/overbuying detection engine for Overbuy."""

from .classifier import (
    FREQUENT_MATCH_MIN_COUNT,
    RECENT_MATCH_MAX_DAYS,
    classify,
    sort_duplicates,
)
from .engine import (
    check_pending_product,
    check_same_list_different_store,
    detect_duplicates,
    get_stats,
)
from .matcher import days_since, find_matches
from .records import (
    DEFAULT_COMPARISON_SETTINGS,
    SIMILARITY_THRESHOLD_DEFAULT,
    Classification,
    ComparisonOption,
    ComparisonSettings,
    Confidence,
    DifferentStoreCheck,
    DuplicateMatch,
    DuplicateStats,
    ListRecord,
    ListSnapshot,
    MatchEntry,
    PendingDuplicate,
    ProductMatches,
    ProductRecord,
    ResolutionAction,
    SuggestedAction,
)
from .similarity import meets_threshold, similarity
from .stats import aggregate
from .validation import (
    DetectionInputError,
    coerce_comparison_settings,
    comparison_settings_to_payload,
    validate_comparison_settings,
    validate_lists,
    validate_products,
    validate_reference_time,
)
from .window_selection import select_window

__all__ = [
    "DEFAULT_COMPARISON_SETTINGS",
    "FREQUENT_MATCH_MIN_COUNT",
    "RECENT_MATCH_MAX_DAYS",
    "SIMILARITY_THRESHOLD_DEFAULT",
    "Classification",
    "ComparisonOption",
    "ComparisonSettings",
    "Confidence",
    "DetectionInputError",
    "DifferentStoreCheck",
    "DuplicateMatch",
    "DuplicateStats",
    "ListRecord",
    "ListSnapshot",
    "MatchEntry",
    "PendingDuplicate",
    "ProductMatches",
    "ProductRecord",
    "ResolutionAction",
    "SuggestedAction",
    "aggregate",
    "check_pending_product",
    "check_same_list_different_store",
    "classify",
    "coerce_comparison_settings",
    "comparison_settings_to_payload",
    "days_since",
    "detect_duplicates",
    "find_matches",
    "get_stats",
    "meets_threshold",
    "select_window",
    "similarity",
    "sort_duplicates",
    "validate_comparison_settings",
    "validate_lists",
    "validate_products",
    "validate_reference_time",
]
