"""Configuration management for farmqc.

This module provides the FarmqcSettings class for managing all
configuration options, supporting both environment variables and
configuration files.
"""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FarmqcSettings(BaseSettings):
    """Global configuration for farmqc.

    Settings can be configured via:
    - Environment variables (prefixed with FARMQC_)
    - .env file
    - Direct instantiation

    Example:
        >>> settings = FarmqcSettings(history_capacity=50)
        >>> # Or via environment: FARMQC_HISTORY_CAPACITY=50
    """

    # Engine state
    history_capacity: int = Field(
        default=100,
        ge=1,
        description="Number of validation calls retained for statistics",
    )
    cache_enabled: bool = Field(
        default=True,
        description="Memoize results by canonical (record, context) key",
    )

    # Rule behaviour
    report_unknown_fields: bool = Field(
        default=True,
        description="Emit an info finding for record keys no field rule names",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="structured",
        description="Log format: 'structured' or 'plain'",
    )

    model_config = SettingsConfigDict(
        env_prefix="FARMQC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump()


# Global settings instance (lazy-loaded)
_settings: FarmqcSettings | None = None


def get_settings() -> FarmqcSettings:
    """Get the global settings instance.

    Returns:
        The global FarmqcSettings instance, creating it if needed.
    """
    global _settings
    if _settings is None:
        _settings = FarmqcSettings()
    return _settings


def configure(**kwargs: Any) -> FarmqcSettings:
    """Configure global settings.

    Args:
        **kwargs: Settings to override

    Returns:
        The updated global settings instance

    Example:
        >>> configure(history_capacity=20, log_level="DEBUG")
    """
    global _settings
    _settings = FarmqcSettings(**kwargs)
    return _settings
