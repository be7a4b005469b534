"""Runtime resolution of per-user comparison settings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, cast, runtime_checkable

from overbuy.dedupe import (
    DEFAULT_COMPARISON_SETTINGS,
    ComparisonSettings,
    DetectionInputError,
    coerce_comparison_settings,
)

if TYPE_CHECKING:
    from overbuy.config.settings import AppSettings


class StoredSettingsLike(Protocol):
    """Minimal stored-settings row needed for resolution."""

    @property
    def user_id(self) -> str:
        """Return owning user id."""
        ...

    @property
    def value(self) -> object:
        """Return decoded JSON payload."""
        ...


@runtime_checkable
class ComparisonSettingsLookup(Protocol):
    """Read contract for retrieving one user's stored comparison settings."""

    async def get_for_user(self, *, user_id: str) -> StoredSettingsLike | None:
        """Return the stored row for `user_id` or None when absent."""
        ...


class ConfigResolutionError(RuntimeError):
    """Base exception for runtime config resolution errors."""


class ConfigValueTypeError(ConfigResolutionError):
    """Raised when stored comparison settings are not a valid payload."""

    @classmethod
    def for_user(cls, *, user_id: str, details: str) -> ConfigValueTypeError:
        """Build deterministic error with user-localized context."""
        message = (
            f"Stored comparison settings for user '{user_id}' are invalid: {details}"
        )
        return cls(message)


class ConfigResolutionService:
    """Resolve effective comparison settings from static and stored sources."""

    _app_settings: AppSettings
    _settings_lookup: ComparisonSettingsLookup

    def __init__(
        self,
        *,
        app_settings: AppSettings,
        settings_lookup: ComparisonSettingsLookup,
    ) -> None:
        """Create service with explicit static and stored config dependencies."""
        self._app_settings = app_settings
        self._settings_lookup = settings_lookup

    @property
    def static_settings(self) -> AppSettings:
        """Expose immutable static env-derived process settings."""
        return self._app_settings

    async def resolve_comparison_settings(self, *, user_id: str) -> ComparisonSettings:
        """Return the user's stored settings, or defaults when none exist."""
        record = await self._settings_lookup.get_for_user(user_id=user_id)
        if record is None:
            return DEFAULT_COMPARISON_SETTINGS

        value = record.value
        if not isinstance(value, Mapping):
            raise ConfigValueTypeError.for_user(
                user_id=user_id,
                details=f"expected object, got {type(value).__name__}.",
            )
        try:
            return coerce_comparison_settings(cast("Mapping[str, object]", value))
        except DetectionInputError as exc:
            raise ConfigValueTypeError.for_user(user_id=user_id, details=str(exc)) from exc
