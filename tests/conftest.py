"""Shared pytest fixtures for SQLite-backed storage tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from overbuy.config.settings import load_settings
from overbuy.storage import ComparisonSettingsRepository, create_storage_runtime

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from overbuy.storage import StorageRuntime

COMPARISON_SETTINGS_DDL = """
CREATE TABLE IF NOT EXISTS comparison_settings (
    id INTEGER PRIMARY KEY,
    user_id VARCHAR(255) NOT NULL,
    value_json TEXT NOT NULL,
    updated_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
    CONSTRAINT uq_comparison_settings_user_id UNIQUE (user_id)
)
"""


@pytest.fixture
def sqlite_db_path(tmp_path: Path) -> Path:
    """Provide a per-test SQLite file path for storage tests."""
    return tmp_path / "overbuy-settings.sqlite3"


@pytest.fixture
async def storage_runtime(sqlite_db_path: Path) -> AsyncIterator[StorageRuntime]:
    """Storage runtime over an isolated database with the settings table."""
    settings = load_settings({"OVERBUY_DB_PATH": sqlite_db_path.as_posix()})
    runtime = create_storage_runtime(settings)
    async with runtime.engine.begin() as connection:
        _ = await connection.exec_driver_sql(COMPARISON_SETTINGS_DDL)
    try:
        yield runtime
    finally:
        await runtime.dispose()


@pytest.fixture
def settings_repository(storage_runtime: StorageRuntime) -> ComparisonSettingsRepository:
    """Comparison-settings repository bound to the isolated runtime."""
    return ComparisonSettingsRepository(session_factory=storage_runtime.session_factory)
