"""
SQLAlchemy declarative base and common mixins.

Services accept any mapped class; these building blocks are offered for
applications that define their models alongside the adapter.

Dependencies: sqlalchemy
System role: Foundation for ORM models served by the adapter
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for ORM model registration.

    Models inheriting from this class are registered with the shared
    metadata and included in create_all().
    """

    pass


class UUIDMixin:
    """
    Mixin providing a UUID primary key.

    Uses the generic Uuid type so the column maps to native UUID on
    PostgreSQL and to CHAR(32) elsewhere.

    Attributes:
        id: UUID v4 primary key, auto-generated on insert
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


class TimestampMixin:
    """
    Mixin providing automatic timestamp tracking.

    created_at is set once on row creation. updated_at is refreshed on every
    update via the onupdate hook, including bulk UPDATE statements issued by
    patch.

    Attributes:
        created_at: Row creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
