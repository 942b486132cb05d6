"""
CRUD service adapter over SQLAlchemy models.

Usage:
    from crud_adapter.service import create_service

    users = create_service(User, session_factory)
    created = await users.create({"name": "Alice"})
    page = await users.find({"query": {"$sort": {"name": 1}}})
"""

from crud_adapter.service.factory import create_service
from crud_adapter.service.params import Page, Pagination, ServiceParams, SQLAlchemyParams
from crud_adapter.service.patch_strategies import (
    PatchStrategy,
    RequeryPatch,
    ReturningPatch,
    select_patch_strategy,
)
from crud_adapter.service.query_builder import build_order, build_where
from crud_adapter.service.query_filter import QueryFilters, filter_query
from crud_adapter.service.selection import select_fields
from crud_adapter.service.service import ServiceOptions, SQLAlchemyService

__all__ = [
    "create_service",
    "SQLAlchemyService",
    "ServiceOptions",
    "ServiceParams",
    "SQLAlchemyParams",
    "Pagination",
    "Page",
    "PatchStrategy",
    "ReturningPatch",
    "RequeryPatch",
    "select_patch_strategy",
    "QueryFilters",
    "filter_query",
    "build_where",
    "build_order",
    "select_fields",
]
