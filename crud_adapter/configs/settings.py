"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator
"""

from functools import lru_cache

from pydantic import Field

from crud_adapter.configs.base import BaseSettings
from crud_adapter.configs.database import DatabaseSettings
from crud_adapter.configs.service import ServiceSettings


class Settings(BaseSettings):
    """Unified settings aggregating all config modules."""

    log_level: str = Field(default="INFO", description="Root log level (LOG_LEVEL)")
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are read once; call get_settings.cache_clear()
    to pick up changes.

    Returns:
        Settings: Application settings instance

    Usage:
        from crud_adapter.configs import get_settings
        settings = get_settings()
    """
    return Settings()
