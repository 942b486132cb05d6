"""
crud_adapter: generic CRUD services over SQLAlchemy models.

Exports:
  - create_service, SQLAlchemyService, ServiceOptions, ServiceParams: Service API
  - ServiceError and subclasses: Error taxonomy raised by service calls
"""

from crud_adapter.core.exceptions import (
    BadRequest,
    Conflict,
    Forbidden,
    GeneralError,
    NotAuthenticated,
    NotFound,
    ServiceError,
    Timeout,
    Unavailable,
    Unprocessable,
)
from crud_adapter.service import (
    Page,
    Pagination,
    ServiceOptions,
    ServiceParams,
    SQLAlchemyParams,
    SQLAlchemyService,
    create_service,
)

__version__ = "0.1.0"

__all__ = [
    "create_service",
    "SQLAlchemyService",
    "ServiceOptions",
    "ServiceParams",
    "SQLAlchemyParams",
    "Pagination",
    "Page",
    "ServiceError",
    "BadRequest",
    "NotAuthenticated",
    "Forbidden",
    "NotFound",
    "Timeout",
    "Conflict",
    "Unprocessable",
    "GeneralError",
    "Unavailable",
]
