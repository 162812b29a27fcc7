"""Vehicle and Status repositories.

Only the reads and the availability writes the sales engine needs.
Both availability writes are conditional, so repeating them is a no-op.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy import or_, select

from app.domain.vehicle import Status, Vehicle
from app.repositories.base import BaseRepository


class VehicleRepository(BaseRepository[Vehicle]):
    model = Vehicle

    async def mark_sold(
        self,
        vehicle_id: str,
        *,
        sold_status_id: str,
        sale_transaction_id: str,
        sale_price: Decimal,
        sold_at: datetime,
    ) -> bool:
        """Move the vehicle to *sold_status_id* unless it already carries it."""
        return await self.update_where(
            vehicle_id,
            or_(Vehicle.status_id.is_(None), Vehicle.status_id != sold_status_id),
            status_id=sold_status_id,
            sale_transaction_id=sale_transaction_id,
            actual_sale_price=sale_price,
            sold_date=sold_at,
        )

    async def release_hold(
        self,
        vehicle_id: str,
        *,
        hold_status_ids: Iterable[str],
        release_status_id: str,
    ) -> bool:
        """Move the vehicle to *release_status_id* only while it is on a hold status."""
        return await self.update_where(
            vehicle_id,
            Vehicle.status_id.in_(list(hold_status_ids)),
            status_id=release_status_id,
        )


class StatusRepository(BaseRepository[Status]):
    model = Status

    async def get_by_slug(self, slug: str) -> Status | None:
        result = await self._session.execute(
            select(Status).where(Status.slug == slug, Status.active.is_(True))
        )
        return result.scalars().first()

    async def get_default(self) -> Status | None:
        result = await self._session.execute(
            select(Status).where(Status.is_default.is_(True), Status.active.is_(True))
        )
        return result.scalars().first()

    async def list_by_slugs(self, slugs: Iterable[str]) -> list[Status]:
        result = await self._session.execute(
            select(Status).where(Status.slug.in_(list(slugs)), Status.active.is_(True))
        )
        return list(result.scalars().all())
