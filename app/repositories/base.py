"""Generic async repository with pagination and conditional writes."""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import ColumnElement, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import Base
from app.domain.mixins import utcnow

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic CRUD repository.

    Deletes are hard deletes. Writes only flush; committing is the caller's job.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self._session = session

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _base_query(self):
        return select(self.model)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_id(self, entity_id: str, *, refresh: bool = False) -> ModelT | None:
        """Fetch one row; ``refresh=True`` overwrites any stale copy in the session."""
        q = self._base_query().where(self.model.id == entity_id)
        if refresh:
            q = q.execution_options(populate_existing=True)
        result = await self._session.execute(q)
        return result.scalars().first()

    async def exists(self, entity_id: str) -> bool:
        result = await self._session.execute(
            select(self.model.id).where(self.model.id == entity_id)
        )
        return result.first() is not None

    async def list(
        self,
        *,
        offset: int = 0,
        limit: int = 20,
        order_by: str = "created_at",
        order: str = "desc",
        filters: dict[str, Any] | None = None,
        conditions: Sequence[ColumnElement[bool]] = (),
    ) -> tuple[list[ModelT], int]:
        """Return (items, total_count) with pagination, equality filters and extra conditions."""
        q = self._base_query()

        # Apply simple equality filters
        if filters:
            for col_name, value in filters.items():
                if value is not None and hasattr(self.model, col_name):
                    q = q.where(getattr(self.model, col_name) == value)
        for condition in conditions:
            q = q.where(condition)

        # Count
        count_q = select(func.count()).select_from(q.subquery())
        total = (await self._session.execute(count_q)).scalar_one()

        # Order + paginate
        col = getattr(self.model, order_by, None)
        if col is not None:
            q = q.order_by(col.desc() if order == "desc" else col.asc())
        q = q.offset(offset).limit(limit)

        items = (await self._session.execute(q)).scalars().all()
        return list(items), total

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, **kwargs: Any) -> ModelT:
        instance = self.model(**kwargs)
        self._session.add(instance)
        await self._session.flush()  # populate id
        await self._session.refresh(instance)
        return instance

    async def update_where(
        self,
        entity_id: str,
        *conditions: ColumnElement[bool],
        **values: Any,
    ) -> bool:
        """UPDATE one row only if *conditions* still hold; True when a row changed.

        This is the compare-and-set primitive: the check and the write happen
        in one statement, so concurrent writers cannot both pass the check.
        """
        values.pop("id", None)
        if "updated_at" not in values and hasattr(self.model, "updated_at"):
            values["updated_at"] = utcnow()

        result = await self._session.execute(
            update(self.model)
            .where(self.model.id == entity_id, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self._session.flush()
        return result.rowcount > 0

    async def delete(self, entity_id: str) -> bool:
        result = await self._session.execute(
            delete(self.model)
            .where(self.model.id == entity_id)
            .execution_options(synchronize_session="fetch")
        )
        await self._session.flush()
        return result.rowcount > 0
