"""Repository for per-user comparison settings stored as JSON rows."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from json import JSONDecodeError
from typing import TYPE_CHECKING, cast

from sqlalchemy import text

from overbuy.dedupe import comparison_settings_to_payload

if TYPE_CHECKING:
    from overbuy.dedupe import ComparisonSettings
    from overbuy.storage.db import SessionFactory

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StoredComparisonSettings:
    """Decoded `comparison_settings` row."""

    user_id: str
    value: dict[str, object]


class ComparisonSettingsRepositoryError(RuntimeError):
    """Base exception for comparison-settings repository operations."""


class ComparisonSettingsDecodeError(ComparisonSettingsRepositoryError):
    """Raised when a stored row cannot be decoded into a JSON object."""

    @classmethod
    def for_user(cls, user_id: str, *, details: str) -> ComparisonSettingsDecodeError:
        """Build deterministic decode error with user-localized context."""
        message = (
            f"Stored comparison settings for user '{user_id}' are not a valid "
            f"JSON object: {details}"
        )
        return cls(message)


class ComparisonSettingsRepository:
    """Read/write helper for rows keyed by `comparison_settings.user_id`."""

    _session_factory: SessionFactory

    def __init__(self, *, session_factory: SessionFactory) -> None:
        """Create repository bound to one session factory."""
        self._session_factory = session_factory

    async def get_for_user(self, *, user_id: str) -> StoredComparisonSettings | None:
        """Fetch the user's stored settings or None when never saved."""
        statement = text(
            """
            SELECT user_id, value_json
            FROM comparison_settings
            WHERE user_id = :user_id
            """,
        )
        async with self._session_factory() as session:
            result = await session.execute(statement, {"user_id": user_id})
            row = result.mappings().one_or_none()
        if row is None:
            return None
        return _decode_row(row)

    async def upsert_for_user(
        self,
        *,
        user_id: str,
        settings: ComparisonSettings,
    ) -> StoredComparisonSettings:
        """Insert or replace the user's settings and return the stored row."""
        encoded = json.dumps(
            comparison_settings_to_payload(settings),
            separators=(",", ":"),
            allow_nan=False,
            sort_keys=True,
        )
        statement = text(
            """
            INSERT INTO comparison_settings (user_id, value_json)
            VALUES (:user_id, :value_json)
            ON CONFLICT (user_id) DO UPDATE
            SET value_json = excluded.value_json,
                updated_at = CURRENT_TIMESTAMP
            RETURNING user_id, value_json
            """,
        )
        async with self._session_factory() as session:
            result = await session.execute(
                statement,
                {"user_id": user_id, "value_json": encoded},
            )
            row = result.mappings().one()
            await session.commit()
        logger.info(
            "Saved comparison settings",
            extra={"user_id": user_id, "window_option": settings.option.value},
        )
        return _decode_row(row)

    async def delete_for_user(self, *, user_id: str) -> bool:
        """Delete stored settings, returning whether a row existed."""
        statement = text(
            """
            DELETE FROM comparison_settings
            WHERE user_id = :user_id
            RETURNING user_id
            """,
        )
        async with self._session_factory() as session:
            result = await session.execute(statement, {"user_id": user_id})
            row = result.mappings().one_or_none()
            await session.commit()
        return row is not None


def _decode_row(row: object) -> StoredComparisonSettings:
    row_map = cast("dict[str, object]", row)
    user_id = str(row_map.get("user_id"))
    value_json = row_map.get("value_json")
    if not isinstance(value_json, str):
        raise ComparisonSettingsDecodeError.for_user(
            user_id,
            details="missing `value_json` text.",
        )
    try:
        decoded = cast("object", json.loads(value_json))
    except JSONDecodeError as exc:
        raise ComparisonSettingsDecodeError.for_user(user_id, details=str(exc)) from exc
    if not isinstance(decoded, dict):
        raise ComparisonSettingsDecodeError.for_user(
            user_id,
            details=f"expected object, got {type(decoded).__name__}.",
        )
    return StoredComparisonSettings(
        user_id=user_id,
        value=cast("dict[str, object]", decoded),
    )
