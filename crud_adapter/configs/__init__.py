"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
"""

from crud_adapter.configs.database import DatabaseSettings
from crud_adapter.configs.service import ServiceSettings
from crud_adapter.configs.settings import Settings, get_settings

__all__ = ["DatabaseSettings", "ServiceSettings", "Settings", "get_settings"]
