"""
Configuration Management for Splitguard

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Rule thresholds that encode product policy (password
length, split rounding slack, whether negative contributions block) live
here rather than as literals scattered through the rules. The rules keep
their documented defaults; settings only decide how the default rule
table is assembled.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from splitguard.money import SPLIT_SUM_TOLERANCE


class ValidationSettings(BaseSettings):
    """
    Thresholds and policy switches for the default rule table.

    Loads configuration from SPLITGUARD_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPLITGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Split reconciliation
    split_sum_tolerance: float = Field(
        default=SPLIT_SUM_TOLERANCE,
        gt=0.0,
        le=1.0,
        description="Absolute slack allowed between summed splits and the total"
    )
    reject_negative_splits: bool = Field(
        default=False,
        description="Block (instead of warn about) negative split contributions"
    )

    # Credentials
    min_password_length: int = Field(
        default=6,
        ge=1,
        le=128,
        description="Minimum password length in characters"
    )

    # Names
    trim_names: bool = Field(
        default=False,
        description="Treat whitespace-only names as empty"
    )
    profile_name_min_length: int = Field(
        default=2,
        ge=1,
        description="Minimum profile name length"
    )
    profile_name_max_length: int = Field(
        default=50,
        ge=1,
        description="Maximum profile name length"
    )
    bio_max_length: int = Field(
        default=500,
        ge=1,
        description="Maximum profile bio length"
    )

    @field_validator('profile_name_max_length')
    @classmethod
    def validate_name_bounds(cls, v: int, info) -> int:
        """Max name length must not undercut the minimum."""
        minimum = info.data.get("profile_name_min_length")
        if minimum is not None and v < minimum:
            raise ValueError(
                f"profile_name_max_length ({v}) is below "
                f"profile_name_min_length ({minimum})"
            )
        return v


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPLITGUARD_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Log level name"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON (False gives console output)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.strip().upper()
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def validation(self) -> ValidationSettings:
        return ValidationSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry for every section that failed to load.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("validation", "logging"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
