"""
Database boundary layer: declarative base, mixins and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Async connection management

Dependencies: sqlalchemy, crud_adapter.configs
"""

from crud_adapter.boundary.db.base import Base, TimestampMixin, UUIDMixin
from crud_adapter.boundary.db.connection import (
    get_async_engine,
    get_async_session_factory,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_engine",
    "get_async_session_factory",
]
