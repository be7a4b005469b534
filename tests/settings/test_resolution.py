"""Tests for per-user comparison settings resolution."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from overbuy.config import (
    ConfigResolutionService,
    ConfigValueTypeError,
    load_settings,
)
from overbuy.dedupe import DEFAULT_COMPARISON_SETTINGS, ComparisonOption


@dataclass(frozen=True, slots=True)
class _Row:
    user_id: str
    value: object


class _Lookup:
    def __init__(self, rows: dict[str, object]) -> None:
        self._rows = rows

    async def get_for_user(self, *, user_id: str) -> _Row | None:
        if user_id not in self._rows:
            return None
        return _Row(user_id=user_id, value=self._rows[user_id])


@pytest.mark.asyncio
async def test_missing_row_resolves_to_defaults() -> None:
    """Users without stored settings get the default comparison settings."""
    service = _service({})

    settings = await service.resolve_comparison_settings(user_id="u1")

    if settings != DEFAULT_COMPARISON_SETTINGS:
        raise AssertionError


@pytest.mark.asyncio
async def test_stored_payload_is_coerced() -> None:
    """Stored camelCase payloads resolve into typed settings."""
    service = _service({"u1": {"option": "last-5", "includeCompleted": True}})

    settings = await service.resolve_comparison_settings(user_id="u1")

    if settings.option != ComparisonOption.LAST_5 or not settings.include_completed:
        raise AssertionError


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("stored", "message"),
    [
        ([1, 2], "expected object, got list"),
        ({"similarityThreshold": 4}, "Invalid similarity threshold"),
    ],
)
async def test_invalid_stored_payload_raises_type_error(
    stored: object,
    message: str,
) -> None:
    """Corrupt stored values surface as user-localized config errors."""
    service = _service({"u1": stored})

    with pytest.raises(ConfigValueTypeError, match=message):
        _ = await service.resolve_comparison_settings(user_id="u1")


def test_static_settings_are_exposed() -> None:
    """The resolver exposes the static settings it was built with."""
    app_settings = load_settings({})
    service = ConfigResolutionService(
        app_settings=app_settings,
        settings_lookup=_Lookup({}),
    )

    if service.static_settings is not app_settings:
        raise AssertionError


def _service(rows: dict[str, object]) -> ConfigResolutionService:
    return ConfigResolutionService(
        app_settings=load_settings({}),
        settings_lookup=_Lookup(rows),
    )
