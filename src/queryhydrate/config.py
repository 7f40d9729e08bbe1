"""Hydration settings and environment loading.

The default retention duration (``cacheTime``) is shared by both sides of a
transfer: the producer leaves it out of records that use it, and the consumer
fills it back in. It is carried explicitly in ``HydrationSettings`` rather
than read from a module constant so that tests and embedders can vary it.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CACHE_TIME_MS = 5 * 60 * 1000


class HydrationSettings(BaseModel):
    """Settings shared by the query cache, dehydrate, and hydrate.

    Attributes:
        default_cache_time_ms: Retention for idle queries when none is configured
        log_level: Logging level used by setup_logging
        json_logs: Whether logs are rendered as JSON

    Example:
        >>> settings = HydrationSettings(default_cache_time_ms=60_000)
        >>> settings.default_cache_time_ms
        60000
    """

    model_config = ConfigDict(frozen=True)

    default_cache_time_ms: int = Field(
        default=DEFAULT_CACHE_TIME_MS,
        ge=0,
        description="Default retention duration for idle queries in milliseconds",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=True, description="Render logs as JSON")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate and normalize the log level name.

        Args:
            value: The level name to validate

        Returns:
            The upper-cased level name

        Raises:
            ValueError: If the level is not a standard logging level
        """
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{value}'")
        return normalized


def get_default_settings() -> HydrationSettings:
    """Get settings with built-in defaults (no environment lookup)."""
    return HydrationSettings()


def load_settings_from_env() -> HydrationSettings:
    """Load hydration settings from environment variables.

    Automatically loads variables from a .env file if present.

    Reads:
    - QUERYHYDRATE_DEFAULT_CACHE_TIME_MS: Default retention in milliseconds
    - QUERYHYDRATE_LOG_LEVEL: Logging level
    - QUERYHYDRATE_JSON_LOGS: Render JSON logs (true/false)

    Returns:
        HydrationSettings loaded from environment
    """
    load_dotenv()

    default_cache_time_ms = int(
        os.getenv("QUERYHYDRATE_DEFAULT_CACHE_TIME_MS", str(DEFAULT_CACHE_TIME_MS))
    )
    log_level = os.getenv("QUERYHYDRATE_LOG_LEVEL", "INFO")
    json_logs_str = os.getenv("QUERYHYDRATE_JSON_LOGS", "true").lower()
    json_logs = json_logs_str in ("true", "1", "yes")

    return HydrationSettings(
        default_cache_time_ms=default_cache_time_ms,
        log_level=log_level,
        json_logs=json_logs,
    )
