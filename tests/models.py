"""
Models used by the test suite.

Dependencies: sqlalchemy, crud_adapter.boundary.db.base
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crud_adapter.boundary.db.base import Base, TimestampMixin, UUIDMixin


class Person(Base):
    """Test model with a unique column and an ORM-managed timestamp."""

    __tablename__ = "people"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(200), unique=True, nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    pets = relationship("Pet", back_populates="owner", cascade="all, delete-orphan")


class Pet(Base):
    """Test model related to Person for eager-loading tests."""

    __tablename__ = "pets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_id: Mapped[int | None] = mapped_column(ForeignKey("people.id"), nullable=True)

    owner = relationship("Person", back_populates="pets")


class Note(Base, UUIDMixin, TimestampMixin):
    """Test model built from the shared mixins."""

    __tablename__ = "notes"

    body: Mapped[str | None] = mapped_column(String(500), nullable=True)


class Article(Base):
    """Test model addressed by a unique slug instead of its primary key."""

    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
