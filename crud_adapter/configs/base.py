"""
Shared settings base.

Every settings class reads the same `.env` file and ignores keys it does
not declare, so the database and service sections can live side by side.

Dependencies: pydantic_settings
System role: Parent of the adapter's settings classes
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Settings base with the adapter's `.env` handling."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
