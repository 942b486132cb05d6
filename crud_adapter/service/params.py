"""
Parameter and result models for CRUD service calls.

Dependencies: pydantic
System role: Typed inbound params and outbound page shape
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from crud_adapter.core.exceptions import BadRequest

T = TypeVar("T")


class Pagination(BaseModel):
    """Pagination defaults: page size when $limit is absent and its upper bound."""

    default: int | None = Field(default=None, ge=1)
    max: int | None = Field(default=None, ge=1)

    @property
    def enabled(self) -> bool:
        return self.default is not None


class SQLAlchemyParams(BaseModel):
    """
    ORM passthrough options merged into the underlying statement.

    Attributes:
        options: Loader options (selectinload, joinedload, ...) for eager loading
        execution_options: Statement execution options
        raw: Per-call override of the service raw mode
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    options: list[Any] = Field(default_factory=list)
    execution_options: dict[str, Any] = Field(default_factory=dict)
    raw: bool | None = None


class ServiceParams(BaseModel):
    """
    Parameters accepted by every service method.

    Attributes:
        query: Filter dict with $sort, $limit, $skip, $select and field operators
        paginate: Per-call pagination; False disables, None uses the service default
        returning: Return affected records from patch/remove (False skips the read)
        sqlalchemy: ORM passthrough options
    """

    query: dict[str, Any] = Field(default_factory=dict)
    paginate: Pagination | bool | None = None
    returning: bool = True
    sqlalchemy: SQLAlchemyParams = Field(default_factory=SQLAlchemyParams)

    @classmethod
    def coerce(cls, params: "ServiceParams | dict[str, Any] | None") -> "ServiceParams":
        """Accept params as a model, a plain dict or None."""
        if params is None:
            return cls()
        if isinstance(params, cls):
            return params
        try:
            return cls.model_validate(params)
        except ValidationError as e:
            raise BadRequest("Invalid service params", details={"errors": e.errors()}) from e


class Page(BaseModel, Generic[T]):
    """Paginated find result."""

    total: int
    limit: int | None
    skip: int = 0
    data: list[T]
