"""
Service factory.

Builds a SQLAlchemyService from a model, filling options the caller does
not pass from ServiceSettings.

Dependencies: crud_adapter.configs, crud_adapter.service.service
System role: Entry point for constructing configured services
"""

from typing import Any

from sqlalchemy.ext.asyncio import async_sessionmaker

from crud_adapter.configs import get_settings
from crud_adapter.service.params import Pagination
from crud_adapter.service.service import ServiceOptions, SQLAlchemyService


def create_service(
    model: Any,
    session_factory: async_sessionmaker | None = None,
    **overrides: Any,
) -> SQLAlchemyService:
    """
    Create a CRUD service for a model.

    Args:
        model: Mapped SQLAlchemy model class
        session_factory: Async session factory (built from DatabaseSettings if None)
        **overrides: ServiceOptions fields taking precedence over settings
            (id_field, raw, paginate, returning_update)

    Returns:
        SQLAlchemyService: Configured service

    Raises:
        ValueError: If the model is missing or does not map the id field

    Usage:
        users = create_service(User, session_factory, paginate={"default": 10, "max": 50})
    """
    if model is None:
        raise ValueError("You must provide a SQLAlchemy model")

    defaults = get_settings().service
    options = {
        "id_field": defaults.id_field,
        "raw": defaults.raw,
        "paginate": Pagination(default=defaults.paginate_default, max=defaults.paginate_max),
        "returning_update": defaults.returning_update,
    }
    options.update(overrides)

    return SQLAlchemyService(
        ServiceOptions(model=model, session_factory=session_factory, **options)
    )
