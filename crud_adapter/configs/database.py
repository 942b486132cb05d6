"""
Database configuration settings.

Connection URL and pool parameters for the async SQLAlchemy engine.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from crud_adapter.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Async database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DB_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str = Field(
        default="sqlite+aiosqlite:///./crud_adapter.db",
        description="Async SQLAlchemy database URL",
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    @property
    def is_sqlite(self) -> bool:
        """Return True when the URL points at SQLite (no server-side pool)."""
        return self.url.startswith("sqlite")
