"""Configuration package."""

from splitguard.config.settings import (
    LoggingSettings,
    Settings,
    ValidationSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "LoggingSettings",
    "Settings",
    "ValidationSettings",
    "get_settings",
    "validate_all_settings",
]
