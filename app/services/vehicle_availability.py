"""Keeps a vehicle's availability status in step with the sale that closes it.

The vehicle write is a separate statement from the transaction's own state
write, and the store gives no atomicity across the two. The service therefore
calls this coordinator only after the transaction state is committed, and
every operation here is safe to repeat:

  on_completed: vehicle -> "sold" (no-op when already sold)
  on_cancelled: vehicle on a hold status -> release status (no-op without a hold)
"""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.domain.sales_transaction import SalesTransaction
from app.repositories.sales_transaction import SalesTransactionRepository
from app.repositories.vehicle import StatusRepository, VehicleRepository

logger = logging.getLogger(__name__)


class AvailabilityCoordinator(Protocol):
    async def on_completed(self, transaction: SalesTransaction) -> None: ...

    async def on_cancelled(self, transaction: SalesTransaction) -> None: ...


class VehicleAvailabilityCoordinator:
    def __init__(self, session: AsyncSession):
        self._vehicles = VehicleRepository(session)
        self._statuses = StatusRepository(session)
        self._transactions = SalesTransactionRepository(session)

    async def on_completed(self, transaction: SalesTransaction) -> None:
        """Mark the sold vehicle and record which sale sold it, for how much and when."""
        sold = await self._statuses.get_by_slug(settings.sold_status_slug)
        if sold is None:
            raise NotFoundError("Status", settings.sold_status_slug)
        if not await self._vehicles.exists(transaction.vehicle_id):
            raise NotFoundError("Vehicle", transaction.vehicle_id)

        changed = await self._vehicles.mark_sold(
            transaction.vehicle_id,
            sold_status_id=sold.id,
            sale_transaction_id=transaction.id,
            sale_price=transaction.sale_price,
            sold_at=transaction.closed_at,
        )
        if changed:
            logger.info(
                "Vehicle %s marked as sold for sale %s", transaction.vehicle_id, transaction.id
            )
        else:
            logger.debug("Vehicle %s already sold; nothing to do", transaction.vehicle_id)

    async def on_cancelled(self, transaction: SalesTransaction) -> None:
        """Release a reserved/pending hold on the vehicle, if one is set."""
        holds = await self._statuses.list_by_slugs(settings.hold_status_slugs)
        if not holds:
            return

        vehicle = await self._vehicles.get_by_id(transaction.vehicle_id, refresh=True)
        hold_ids = {status.id for status in holds}
        if vehicle is None or vehicle.status_id not in hold_ids:
            logger.debug("Vehicle %s has no hold to release", transaction.vehicle_id)
            return

        others = await self._transactions.count_pending_for_vehicle(
            transaction.vehicle_id, exclude_id=transaction.id
        )
        if others:
            logger.info(
                "Vehicle %s kept on hold: %d other pending sale(s)", transaction.vehicle_id, others
            )
            return

        release = await self._statuses.get_by_slug(settings.release_status_slug)
        if release is None:
            release = await self._statuses.get_default()
        if release is None:
            raise NotFoundError("Status", settings.release_status_slug)

        changed = await self._vehicles.release_hold(
            transaction.vehicle_id,
            hold_status_ids=hold_ids,
            release_status_id=release.id,
        )
        if changed:
            logger.info(
                "Vehicle %s released to '%s' after sale %s was cancelled",
                transaction.vehicle_id, release.slug, transaction.id,
            )
