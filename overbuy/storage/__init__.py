"""Storage module for Overbuy."""

from .comparison_settings_repo import (
    ComparisonSettingsDecodeError,
    ComparisonSettingsRepository,
    ComparisonSettingsRepositoryError,
    StoredComparisonSettings,
)
from .db import (
    SQLITE_PRAGMA_STATEMENTS,
    SessionFactory,
    StorageRuntime,
    build_sqlite_url,
    create_storage_runtime,
)
from .migrations import MigrationStartupError, run_startup_migrations

__all__ = [
    "SQLITE_PRAGMA_STATEMENTS",
    "ComparisonSettingsDecodeError",
    "ComparisonSettingsRepository",
    "ComparisonSettingsRepositoryError",
    "MigrationStartupError",
    "SessionFactory",
    "StorageRuntime",
    "StoredComparisonSettings",
    "build_sqlite_url",
    "create_storage_runtime",
    "run_startup_migrations",
]
