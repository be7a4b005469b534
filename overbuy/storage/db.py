"""Async SQLAlchemy engine and session wiring for SQLite storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

if TYPE_CHECKING:
    from pathlib import Path
    from typing import Protocol

    from overbuy.config.settings import AppSettings

    class _DBAPICursor(Protocol):
        def execute(self, statement: str) -> object: ...

        def close(self) -> None: ...

    class _DBAPIConnection(Protocol):
        def cursor(self) -> _DBAPICursor: ...


SQLITE_PRAGMA_STATEMENTS: tuple[str, ...] = (
    "PRAGMA journal_mode=WAL;",
    "PRAGMA foreign_keys=ON;",
    "PRAGMA busy_timeout=5000;",
)

SessionFactory = async_sessionmaker[AsyncSession]


@dataclass(slots=True)
class StorageRuntime:
    """Engine plus the session factory repositories read and write through."""

    engine: AsyncEngine
    session_factory: SessionFactory

    async def dispose(self) -> None:
        """Close pooled connections at shutdown or fixture teardown."""
        await self.engine.dispose()


def build_sqlite_url(db_path: Path) -> str:
    """Build SQLAlchemy async SQLite URL from configured db path."""
    return f"sqlite+aiosqlite:///{db_path.expanduser().as_posix()}"


def create_storage_runtime(settings: AppSettings) -> StorageRuntime:
    """Create the SQLite engine and its typed session factory."""
    engine = create_async_engine(build_sqlite_url(settings.db_path), future=True)
    _install_sqlite_pragma_handler(engine)
    return StorageRuntime(
        engine=engine,
        session_factory=async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
        ),
    )


def _install_sqlite_pragma_handler(engine: AsyncEngine) -> None:
    """Apply required SQLite PRAGMAs on each fresh DBAPI connection."""

    def _set_sqlite_pragmas(
        dbapi_connection: object,
        connection_record: object,
    ) -> None:
        _ = connection_record
        connection = cast("_DBAPIConnection", dbapi_connection)
        cursor = connection.cursor()
        try:
            for statement in SQLITE_PRAGMA_STATEMENTS:
                _ = cursor.execute(statement)
        finally:
            cursor.close()

    event.listen(engine.sync_engine, "connect", _set_sqlite_pragmas)
