"""Configuration module for Overbuy."""

from .resolution import (
    ComparisonSettingsLookup,
    ConfigResolutionError,
    ConfigResolutionService,
    ConfigValueTypeError,
)
from .settings import AppSettings, SettingsValidationError, load_settings

__all__ = [
    "AppSettings",
    "ComparisonSettingsLookup",
    "ConfigResolutionError",
    "ConfigResolutionService",
    "ConfigValueTypeError",
    "SettingsValidationError",
    "load_settings",
]
