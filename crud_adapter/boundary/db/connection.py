"""
Database connection management.

Builds the async SQLAlchemy engine and session factory that services use
when the caller does not supply its own.

Dependencies: sqlalchemy, crud_adapter.configs
System role: Database connection lifecycle management
"""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from crud_adapter.configs import DatabaseSettings, get_settings


def get_async_engine(db_config: DatabaseSettings | None = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect stale or
    broken connections early. SQLite URLs skip the pool sizing arguments,
    which its pool classes do not accept.

    Args:
        db_config: Database settings (defaults to application settings)

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    db_config = db_config or get_settings().database

    if db_config.is_sqlite:
        return create_async_engine(db_config.url, echo=db_config.echo_sql)

    return create_async_engine(
        db_config.url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(
    engine: AsyncEngine | None = None,
) -> async_sessionmaker:
    """
    Create async session factory for service operations.

    expire_on_commit=False keeps returned ORM instances readable after the
    service commits its unit of work.

    Args:
        engine: Engine to bind (defaults to get_async_engine())

    Returns:
        async_sessionmaker: Async session factory

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine or get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )
