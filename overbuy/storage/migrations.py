"""Alembic migration runner for the comparison-settings database."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from overbuy.config.settings import ENV_DB_PATH, load_settings

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ALEMBIC_CONFIG_PATH = PROJECT_ROOT / "alembic.ini"
ALEMBIC_EXECUTABLE = Path(sys.executable).with_name("alembic")


class MigrationStartupError(RuntimeError):
    """Raised when the schema cannot be brought to Alembic head."""

    @classmethod
    def for_db_path_prepare_failure(
        cls,
        db_path: Path,
        *,
        details: str,
    ) -> MigrationStartupError:
        """Build error for DB directory creation failures."""
        message = (
            "Failed to prepare database path for migrations "
            f"(db={db_path.as_posix()}): {details}"
        )
        return cls(message)

    @classmethod
    def for_upgrade_failure(cls, db_path: Path, *, details: str) -> MigrationStartupError:
        """Build error for a failed `alembic upgrade head` run."""
        message = (
            "Failed to apply migrations with `alembic upgrade head` "
            f"(db={db_path.as_posix()}): {details}"
        )
        return cls(message)

    @classmethod
    def for_missing_executable(cls, executable: Path) -> MigrationStartupError:
        """Build error for a runtime env without the Alembic CLI."""
        message = f"Missing Alembic executable required for migrations: {executable}."
        return cls(message)


def run_startup_migrations(environ: Mapping[str, str] | None = None) -> None:
    """Upgrade the configured database schema to Alembic head."""
    settings = load_settings(environ)
    db_path = settings.db_path.expanduser()
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MigrationStartupError.for_db_path_prepare_failure(
            db_path,
            details=str(exc),
        ) from exc

    if not ALEMBIC_EXECUTABLE.exists():
        raise MigrationStartupError.for_missing_executable(ALEMBIC_EXECUTABLE)

    logger.info("Applying migrations to Alembic head (db=%s)", db_path)
    env = {**os.environ, **(environ or {}), ENV_DB_PATH: db_path.as_posix()}

    try:
        result = subprocess.run(  # noqa: S603
            [
                ALEMBIC_EXECUTABLE.as_posix(),
                "-c",
                ALEMBIC_CONFIG_PATH.as_posix(),
                "upgrade",
                "head",
            ],
            cwd=PROJECT_ROOT,
            check=False,
            capture_output=True,
            text=True,
            env=env,
        )
    except OSError as exc:
        raise MigrationStartupError.for_upgrade_failure(db_path, details=str(exc)) from exc
    if result.returncode != 0:
        output = result.stderr.strip() or result.stdout.strip() or "unknown error"
        raise MigrationStartupError.for_upgrade_failure(db_path, details=output)

    logger.info("Migrations complete (db=%s)", db_path)
