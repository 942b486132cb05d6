"""
SQLAlchemy CRUD service.

Adapts the generic service interface (find, get, create, patch, update,
remove) to one SQLAlchemy model. Each call runs in its own session,
translates the query filter into a statement, and returns plain dicts
(raw mode) or ORM instances.

Dependencies: sqlalchemy, pydantic, crud_adapter.core, crud_adapter.configs
System role: CRUD adapter between service callers and the ORM
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from pydantic import BaseModel, ConfigDict, Field, model_validator
from sqlalchemy import delete, func, inspect, select
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import load_only
from sqlalchemy.sql.elements import ColumnElement

from crud_adapter.core.error_handler import translate_error
from crud_adapter.core.exceptions import BadRequest, NotFound
from crud_adapter.observability.log_utils import log_with_context
from crud_adapter.service.params import Page, Pagination, ServiceParams
from crud_adapter.service.patch_strategies import (
    PatchStrategy,
    select_patch_strategy,
    supports_update_returning,
)
from crud_adapter.service.query_builder import (
    build_order,
    build_where,
    column_keys,
    get_column,
)
from crud_adapter.service.query_filter import filter_query, parse_select
from crud_adapter.service.selection import select_fields

logger = logging.getLogger(__name__)


class ServiceOptions(BaseModel):
    """
    Configuration for a SQLAlchemyService.

    Attributes:
        model: Mapped SQLAlchemy model class
        id_field: Column attribute used to address single records
        raw: Return plain dicts instead of ORM instances
        paginate: Default pagination (disabled unless default is set)
        returning_update: Force (True) or forbid (False) the UPDATE ... RETURNING
            patch path; None detects it from the dialect
        session_factory: Async session factory; built from settings when omitted
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    model: Any
    id_field: str = "id"
    raw: bool = True
    paginate: Pagination = Field(default_factory=Pagination)
    returning_update: bool | None = None
    session_factory: async_sessionmaker | None = None

    @model_validator(mode="after")
    def check_model(self) -> "ServiceOptions":
        """Require a mapped model that maps the id field as a column."""
        if self.model is None:
            raise ValueError("You must provide a SQLAlchemy model")
        try:
            mapper = inspect(self.model)
        except NoInspectionAvailable as e:
            raise ValueError(f"{self.model!r} is not a mapped SQLAlchemy model") from e
        if self.id_field not in mapper.column_attrs:
            raise ValueError(
                f"Model {mapper.class_.__name__} has no column '{self.id_field}'"
            )
        return self


class SQLAlchemyService:
    """
    CRUD service over a single SQLAlchemy model.

    Every method accepts params as a ServiceParams, a plain dict with the
    same keys, or None.

    Usage:
        users = SQLAlchemyService(ServiceOptions(model=User, session_factory=factory))
        page = await users.find({"query": {"age": {"$gte": 18}, "$limit": 10}})
        user = await users.patch(1, {"name": "Alice"})
    """

    def __init__(self, options: ServiceOptions | None = None, **kwargs: Any) -> None:
        """
        Initialize service from options or keyword arguments.

        Args:
            options: Service configuration
            **kwargs: ServiceOptions fields, used when options is omitted

        Raises:
            ValueError: If no model is given or it does not map the id field
        """
        if options is None:
            if kwargs.get("model") is None:
                raise ValueError("You must provide a SQLAlchemy model")
            options = ServiceOptions(**kwargs)

        self.options = options
        self.model = options.model
        self.id_field = options.id_field
        self.raw = options.raw
        self.paginate = options.paginate
        self._session_factory = options.session_factory

        mapper = inspect(self.model)
        self._columns = column_keys(self.model)
        self._primary_keys = {
            mapper.get_property_by_column(column).key for column in mapper.primary_key
        }
        # The id field and primary keys are never written by update
        self._fixed = self._primary_keys | {self.id_field}
        # Columns kept on update when absent from the replacement data
        self._protected = set(self._fixed)
        self._protected.update(
            prop.key
            for prop in mapper.column_attrs
            if any(
                not column.nullable
                and (column.default is not None or column.server_default is not None)
                for column in prop.columns
            )
        )

    @property
    def session_factory(self) -> async_sessionmaker:
        """Session factory, created from database settings on first use."""
        if self._session_factory is None:
            from crud_adapter.boundary.db.connection import get_async_session_factory

            self._session_factory = get_async_session_factory()
        return self._session_factory

    @property
    def id_column(self) -> Any:
        return getattr(self.model, self.id_field)

    def is_raw(self, params: ServiceParams) -> bool:
        """Return the effective raw mode for a call."""
        if params.sqlalchemy.raw is not None:
            return params.sqlalchemy.raw
        return self.raw

    def serialize(self, instance: Any, raw: bool) -> Any:
        """
        Convert an ORM instance to a record.

        Only loaded attributes are read, so columns deferred by $select are
        left out instead of triggering a lazy load.
        """
        if not raw:
            return instance
        state = inspect(instance).dict
        return {key: state[key] for key in self._columns if key in state}

    def _clean(self, data: dict[str, Any]) -> dict[str, Any]:
        """Drop keys that are not mapped columns."""
        cleaned = {key: value for key, value in data.items() if key in self._columns}
        ignored = set(data) - set(cleaned)
        if ignored:
            log_with_context(
                logger,
                logging.DEBUG,
                "Ignoring unmapped fields",
                model=self.model.__name__,
                fields=sorted(ignored),
            )
        return cleaned

    def _pagination(self, params: ServiceParams) -> Pagination | None:
        if params.paginate is False:
            return None
        if isinstance(params.paginate, Pagination):
            return params.paginate
        return self.paginate

    def _target(self, id: Any, params: ServiceParams) -> list[ColumnElement[bool]]:
        """WHERE clauses for the query's field filter plus the id, if given."""
        _, field_query = filter_query(params.query)
        where = build_where(self.model, field_query)
        if id is not None:
            where.append(self.id_column == id)
        return where

    def _apply_sqlalchemy_options(self, stmt: Any, params: ServiceParams) -> Any:
        if params.sqlalchemy.options:
            stmt = stmt.options(*params.sqlalchemy.options)
        if params.sqlalchemy.execution_options:
            stmt = stmt.execution_options(**params.sqlalchemy.execution_options)
        return stmt

    async def _patch_strategy(self, session: AsyncSession) -> PatchStrategy:
        supports_returning = self.options.returning_update
        if supports_returning is None:
            supports_returning = supports_update_returning(session)
        return select_patch_strategy(supports_returning)

    @asynccontextmanager
    async def _unit_of_work(self, operation: str, id: Any = None) -> AsyncIterator[AsyncSession]:
        """
        Open a session, commit on success, translate errors on failure.

        Args:
            operation: Operation name for logging
            id: Target id for logging
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                translate_error(
                    e, model=self.model.__name__, operation=operation, record_id=id
                )

    async def _find(
        self,
        session: AsyncSession,
        params: ServiceParams,
        paginate: Pagination | None,
        count: bool,
    ) -> Page:
        filters, field_query = filter_query(params.query, paginate)
        where = build_where(self.model, field_query)

        stmt = (
            select(self.model)
            .where(*where)
            .order_by(*build_order(self.model, filters.sort))
        )
        if filters.limit is not None:
            stmt = stmt.limit(filters.limit)
        if filters.skip:
            stmt = stmt.offset(filters.skip)
        if filters.select:
            fields = dict.fromkeys([self.id_field, *filters.select])
            stmt = stmt.options(load_only(*(get_column(self.model, f) for f in fields)))
        stmt = self._apply_sqlalchemy_options(stmt, params)

        result = await session.execute(stmt)
        raw = self.is_raw(params)
        data = [self.serialize(instance, raw) for instance in result.unique().scalars().all()]

        if count:
            count_stmt = select(func.count()).select_from(self.model).where(*where)
            total = (await session.execute(count_stmt)).scalar_one()
        else:
            total = len(data)

        return Page(
            total=total,
            limit=filters.limit,
            skip=filters.skip or 0,
            data=select_fields(data, filters.select, self.id_field),
        )

    async def _lookup(
        self, session: AsyncSession, id: Any, params: ServiceParams | None = None
    ) -> Any:
        """
        Load the instance whose id field equals id.

        With loader options in params (eager loading), the query's field
        filter is applied as well.

        Raises:
            NotFound: If no record matches
        """
        if params is not None and params.sqlalchemy.options:
            where = self._target(id, params)
        else:
            where = [self.id_column == id]

        stmt = select(self.model).where(*where).execution_options(populate_existing=True)
        if params is not None:
            stmt = self._apply_sqlalchemy_options(stmt, params)
        result = await session.execute(stmt)
        instance = result.unique().scalars().first()

        if instance is None:
            raise NotFound.for_id(id)
        return instance

    async def _get(self, session: AsyncSession, id: Any, params: ServiceParams) -> Any:
        instance = await self._lookup(session, id, params)
        return self.serialize(instance, self.is_raw(params))

    async def read_back(
        self,
        session: AsyncSession,
        id: Any,
        where: list[ColumnElement[bool]],
        params: ServiceParams,
    ) -> Any:
        """
        Read the rows matching a WHERE after (or before) a write.

        Args:
            session: Open unit of work
            id: Single target id, or None for every match
            where: Clauses selecting the rows
            params: Call parameters (loader options, raw mode)

        Returns:
            Record for a single id, list of records otherwise

        Raises:
            NotFound: If a single id matched nothing
        """
        stmt = select(self.model).where(*where).execution_options(populate_existing=True)
        stmt = self._apply_sqlalchemy_options(stmt, params)
        result = await session.execute(stmt)
        raw = self.is_raw(params)
        records = [self.serialize(instance, raw) for instance in result.unique().scalars().all()]

        if id is None:
            return records
        if not records:
            raise NotFound.for_id(id)
        return records[0]

    async def find(self, params: ServiceParams | dict[str, Any] | None = None) -> Page | list[Any]:
        """
        Find records matching the query.

        Args:
            params: Call parameters; params.paginate overrides the service default

        Returns:
            Page when pagination is enabled, otherwise a list of records
        """
        params = ServiceParams.coerce(params)
        paginate = self._pagination(params)
        paginated = paginate is not None and paginate.enabled

        async with self._unit_of_work("find") as session:
            page = await self._find(session, params, paginate, count=paginated)

        return page if paginated else page.data

    async def get(self, id: Any, params: ServiceParams | dict[str, Any] | None = None) -> Any:
        """
        Get a single record by id.

        Raises:
            NotFound: If no record has that id
        """
        params = ServiceParams.coerce(params)
        async with self._unit_of_work("get", id) as session:
            record = await self._get(session, id, params)
        return select_fields(record, parse_select(params.query.get("$select")), self.id_field)

    async def create(
        self,
        data: dict[str, Any] | list[dict[str, Any]],
        params: ServiceParams | dict[str, Any] | None = None,
    ) -> Any:
        """
        Create one record, or several in a single flush when data is a list.

        Args:
            data: Record or list of records
            params: Call parameters

        Returns:
            Created record, or list of created records in input order

        Raises:
            BadRequest: If data is not a record or list of records
        """
        params = ServiceParams.coerce(params)
        is_list = isinstance(data, list)
        items = data if is_list else [data]
        if not all(isinstance(item, dict) for item in items):
            raise BadRequest("Data must be a record or a list of records")
        if not items:
            return []

        raw = self.is_raw(params)
        async with self._unit_of_work("create") as session:
            instances = [self.model(**self._clean(item)) for item in items]
            session.add_all(instances)
            await session.flush()
            for instance in instances:
                await session.refresh(instance)
            records = [self.serialize(instance, raw) for instance in instances]

        log_with_context(
            logger, logging.DEBUG, "Created records", model=self.model.__name__, count=len(records)
        )
        selected = select_fields(records, parse_select(params.query.get("$select")), self.id_field)
        return selected if is_list else selected[0]

    async def patch(
        self,
        id: Any,
        data: dict[str, Any],
        params: ServiceParams | dict[str, Any] | None = None,
    ) -> Any:
        """
        Partially update one record, or every record matching the query when id is None.

        Args:
            id: Target id, or None for a multi patch
            data: Fields to change; the id field is never changed
            params: Call parameters; params.returning=False skips reading back

        Returns:
            Patched record, or list of patched records for id=None

        Raises:
            NotFound: If a single id matched nothing
        """
        params = ServiceParams.coerce(params)
        if not isinstance(data, dict):
            raise BadRequest("Patch data must be a record")
        values = self._clean({k: v for k, v in data.items() if k != self.id_field})

        async with self._unit_of_work("patch", id) as session:
            where = self._target(id, params)
            if values:
                strategy = await self._patch_strategy(session)
                log_with_context(
                    logger,
                    logging.DEBUG,
                    "Patching records",
                    model=self.model.__name__,
                    record_id=id,
                    strategy=strategy.name,
                )
                result = await strategy.patch(self, session, id, values, where, params)
            else:
                result = await self.read_back(session, id, where, params)

        return select_fields(result, parse_select(params.query.get("$select")), self.id_field)

    async def update(
        self,
        id: Any,
        data: dict[str, Any],
        params: ServiceParams | dict[str, Any] | None = None,
    ) -> Any:
        """
        Replace a single record.

        Mapped columns missing from data are set to None, with a deliberate
        exception: identity columns (the id field and primary key) and
        non-nullable columns with a default, such as created_at, keep their
        stored value. Identity columns are never overwritten from data.

        Raises:
            BadRequest: If data is a list
            NotFound: If no record has that id
        """
        params = ServiceParams.coerce(params)
        if isinstance(data, list):
            raise BadRequest("Not replacing multiple records. Did you mean `patch`?")
        if not isinstance(data, dict):
            raise BadRequest("Update data must be a record")

        async with self._unit_of_work("update", id) as session:
            instance = await self._lookup(session, id)

            for key in self._columns:
                if key in data and key not in self._fixed:
                    setattr(instance, key, data[key])
                elif key not in self._protected:
                    setattr(instance, key, None)

            await session.flush()
            await session.refresh(instance)
            record = self.serialize(instance, self.is_raw(params))

        log_with_context(
            logger, logging.DEBUG, "Replaced record", model=self.model.__name__, record_id=id
        )
        return select_fields(record, parse_select(params.query.get("$select")), self.id_field)

    async def remove(self, id: Any, params: ServiceParams | dict[str, Any] | None = None) -> Any:
        """
        Remove one record, or every record matching the query when id is None.

        Args:
            id: Target id, or None for a multi remove
            params: Call parameters; params.returning=False skips reading first

        Returns:
            Removed record(s) as they were before deletion, [] without returning

        Raises:
            NotFound: If a single id matched nothing
        """
        params = ServiceParams.coerce(params)

        async with self._unit_of_work("remove", id) as session:
            where = self._target(id, params)
            removed: Any = []
            if params.returning:
                removed = await self.read_back(session, id, where, params)

            result = await session.execute(
                delete(self.model).where(*where).execution_options(synchronize_session=False)
            )
            if id is not None and not params.returning and result.rowcount == 0:
                raise NotFound.for_id(id)

        log_with_context(
            logger, logging.DEBUG, "Removed records", model=self.model.__name__, record_id=id
        )
        return select_fields(removed, parse_select(params.query.get("$select")), self.id_field)
