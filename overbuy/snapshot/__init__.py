"""Snapshot extraction module for Overbuy."""

from .extraction import (
    SnapshotExtractionError,
    extract_list_snapshots,
    parse_timestamp,
    split_current_list,
)

__all__ = [
    "SnapshotExtractionError",
    "extract_list_snapshots",
    "parse_timestamp",
    "split_current_list",
]
