"""Sales transaction repository — persistence only, no lifecycle rules."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, func, or_, select

from app.domain.sales_transaction import SalesTransaction
from app.repositories.base import BaseRepository


def _range_conditions(
    date_from: datetime | None, date_to: datetime | None
) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []
    if date_from is not None:
        conditions.append(SalesTransaction.created_at >= date_from)
    if date_to is not None:
        conditions.append(SalesTransaction.created_at <= date_to)
    return conditions


class SalesTransactionRepository(BaseRepository[SalesTransaction]):
    model = SalesTransaction

    async def transition(
        self, entity_id: str, *, expected_status: str, **values: Any
    ) -> SalesTransaction | None:
        """Write *values* only if the stored status is still *expected_status*.

        Returns the reloaded row, or None when the row is gone or its status
        changed since it was read.
        """
        changed = await self.update_where(
            entity_id, SalesTransaction.status == expected_status, **values
        )
        if not changed:
            return None
        return await self.get_by_id(entity_id, refresh=True)

    async def search(
        self,
        *,
        offset: int,
        limit: int,
        order_by: str = "created_at",
        order: str = "desc",
        status: str | None = None,
        salesperson_id: str | None = None,
        vehicle_id: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        text: str | None = None,
    ) -> tuple[list[SalesTransaction], int]:
        conditions = _range_conditions(date_from, date_to)
        if text:
            pattern = f"%{text}%"
            conditions.append(
                or_(
                    SalesTransaction.customer_name.ilike(pattern),
                    SalesTransaction.customer_email.ilike(pattern),
                    SalesTransaction.external_deal_id.ilike(pattern),
                )
            )
        return await self.list(
            offset=offset,
            limit=limit,
            order_by=order_by,
            order=order,
            filters={
                "status": status,
                "salesperson_id": salesperson_id,
                "vehicle_id": vehicle_id,
            },
            conditions=conditions,
        )

    async def count_pending_for_vehicle(self, vehicle_id: str, *, exclude_id: str | None = None) -> int:
        q = (
            select(func.count())
            .select_from(SalesTransaction)
            .where(SalesTransaction.vehicle_id == vehicle_id)
            .where(SalesTransaction.status == "pending")
        )
        if exclude_id is not None:
            q = q.where(SalesTransaction.id != exclude_id)
        return (await self._session.execute(q)).scalar_one()

    async def summary_by_status(
        self,
        *,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        salesperson_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Aggregate count, revenue, gross and margin per status."""
        q = select(
            SalesTransaction.status,
            func.count().label("count"),
            func.coalesce(func.sum(SalesTransaction.total_price), 0).label("total_revenue"),
            func.coalesce(func.sum(SalesTransaction.sale_price), 0).label("total_gross"),
            func.coalesce(func.sum(SalesTransaction.margin), 0).label("total_margin"),
        ).group_by(SalesTransaction.status)
        for condition in _range_conditions(date_from, date_to):
            q = q.where(condition)
        if salesperson_id:
            q = q.where(SalesTransaction.salesperson_id == salesperson_id)

        rows = (await self._session.execute(q.order_by(SalesTransaction.status))).all()
        return [dict(row._mapping) for row in rows]
