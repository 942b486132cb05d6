"""
Patch strategies.

Dialects that support UPDATE ... RETURNING patch and read back the
affected rows in one statement; the rest resolve the affected ids first,
update, then re-read those ids. The re-read is not isolated from
concurrent writers.

Dependencies: sqlalchemy
System role: Dialect-dependent half of the patch operation
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from crud_adapter.core.exceptions import NotFound
from crud_adapter.service.params import ServiceParams

if TYPE_CHECKING:
    from crud_adapter.service.service import SQLAlchemyService


def supports_update_returning(session: AsyncSession) -> bool:
    """Return True when the session's dialect can emit UPDATE ... RETURNING."""
    dialect = session.get_bind().dialect
    return bool(getattr(dialect, "update_returning", False))


class PatchStrategy(ABC):
    """Applies a patch to the rows matched by a WHERE and returns the result."""

    name: str = ""

    @abstractmethod
    async def patch(
        self,
        service: "SQLAlchemyService",
        session: AsyncSession,
        id: Any,
        values: dict[str, Any],
        where: list[ColumnElement[bool]],
        params: ServiceParams,
    ) -> Any:
        """
        Patch matching rows.

        Args:
            service: Owning service (model, id column, serialization)
            session: Open unit of work
            id: Target id, or None to patch every match
            values: Column values to set
            where: Clauses selecting the target rows (id included)
            params: Call parameters

        Returns:
            Patched record for a single id, list of records for id=None,
            [] / None when params.returning is False

        Raises:
            NotFound: If a single id matched nothing
        """

    @staticmethod
    def _unreturned(id: Any, rowcount: int) -> Any:
        if id is not None:
            if rowcount == 0:
                raise NotFound.for_id(id)
            return None
        return []


class ReturningPatch(PatchStrategy):
    """Single UPDATE ... RETURNING statement."""

    name = "returning"

    async def patch(self, service, session, id, values, where, params):
        # Loader options do not apply to UPDATE ... RETURNING; the patched rows
        # come back with their columns only
        stmt = (
            update(service.model)
            .where(*where)
            .values(**values)
            .execution_options(**params.sqlalchemy.execution_options)
        )
        raw = service.is_raw(params)

        if not params.returning:
            result = await session.execute(stmt.execution_options(synchronize_session=False))
            return self._unreturned(id, result.rowcount)

        result = await session.execute(stmt.returning(service.model))
        instances = result.scalars().all()

        if id is None:
            return [service.serialize(instance, raw) for instance in instances]
        if not instances:
            raise NotFound.for_id(id)
        return service.serialize(instances[0], raw)


class RequeryPatch(PatchStrategy):
    """Resolve affected ids, UPDATE, then re-read those ids."""

    name = "requery"

    async def patch(self, service, session, id, values, where, params):
        id_column = service.id_column
        if id is None:
            result = await session.execute(select(id_column).where(*where))
            ids = list(result.scalars().all())
        else:
            ids = [id]

        result = await session.execute(
            update(service.model)
            .where(*where)
            .values(**values)
            .execution_options(synchronize_session=False)
            .execution_options(**params.sqlalchemy.execution_options)
        )

        if not params.returning:
            return self._unreturned(id, result.rowcount)

        if id is not None and result.rowcount == 0:
            raise NotFound.for_id(id)

        return await service.read_back(session, id, [id_column.in_(ids)], params)


def select_patch_strategy(supports_returning: bool) -> PatchStrategy:
    """
    Choose the patch strategy for a capability flag.

    Args:
        supports_returning: Whether the dialect supports UPDATE ... RETURNING

    Returns:
        PatchStrategy: ReturningPatch or RequeryPatch
    """
    return ReturningPatch() if supports_returning else RequeryPatch()
