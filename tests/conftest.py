"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite engine, session factory, services
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from crud_adapter.boundary.db.base import Base
from crud_adapter.service import Pagination, ServiceOptions, SQLAlchemyService
from tests.models import Person


@pytest.fixture
async def engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine sharing one connection across sessions
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    """Provide a session factory bound to the test engine."""
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture(params=[True, False], ids=["returning", "requery"])
def people(request, session_factory) -> SQLAlchemyService:
    """
    Provide a Person service, once per patch strategy.

    Returns:
        SQLAlchemyService: Service with raw mode and no pagination
    """
    return SQLAlchemyService(
        ServiceOptions(
            model=Person,
            session_factory=session_factory,
            returning_update=request.param,
        )
    )


@pytest.fixture
def paginated_people(session_factory) -> SQLAlchemyService:
    """Provide a Person service paginating by 2, capped at 3."""
    return SQLAlchemyService(
        ServiceOptions(
            model=Person,
            session_factory=session_factory,
            paginate=Pagination(default=2, max=3),
        )
    )


@pytest.fixture
async def seeded(people: SQLAlchemyService) -> list[dict]:
    """
    Insert four people and return them as created.

    Returns:
        list[dict]: Created records ordered by id
    """
    return await people.create(
        [
            {"name": "Alice", "email": "alice@example.com", "age": 30},
            {"name": "Bob", "email": "bob@example.com", "age": 25},
            {"name": "Carol", "email": "carol@example.com", "age": 35},
            {"name": "Dave", "email": None, "age": None},
        ]
    )
