"""Sales transaction service — orchestrates calculator, lifecycle and vehicle coordinator.

Rule: No FastAPI here. Lifecycle rules live in sales_lifecycle, money in
financials, the vehicle-side effect in vehicle_availability.

complete/cancel run in two committed steps:
  1. conditional write of the new status (only if still pending), commit
  2. vehicle availability update, commit
If step 2 fails the transaction keeps its new status and the caller gets
DownstreamEffectFailedError; retrying the vehicle update is safe.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DownstreamEffectFailedError,
    InvalidStateTransitionError,
    NotFoundError,
)
from app.core.pagination import PaginationParams
from app.domain.mixins import utcnow
from app.domain.sales_transaction import SalesTransaction
from app.repositories.sales_transaction import SalesTransactionRepository
from app.repositories.vehicle import VehicleRepository
from app.schemas.sales_transaction import SalesTransactionCreate, SalesTransactionUpdate
from app.services import financials, sales_lifecycle
from app.services.vehicle_availability import AvailabilityCoordinator, VehicleAvailabilityCoordinator

logger = logging.getLogger(__name__)

# Columns an update may not null out
_REQUIRED_ON_UPDATE = ("customer_name", "currency")


class SalesTransactionService:
    def __init__(
        self,
        session: AsyncSession,
        coordinator: AvailabilityCoordinator | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session = session
        self._repo = SalesTransactionRepository(session)
        self._vehicles = VehicleRepository(session)
        self._coordinator = coordinator or VehicleAvailabilityCoordinator(session)
        self._clock = clock

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def list_transactions(
        self,
        pagination: PaginationParams,
        *,
        status: str | None = None,
        salesperson_id: str | None = None,
        vehicle_id: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        search: str | None = None,
    ) -> tuple[list[SalesTransaction], int]:
        return await self._repo.search(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            status=status,
            salesperson_id=salesperson_id,
            vehicle_id=vehicle_id,
            date_from=date_from,
            date_to=date_to,
            text=search.strip() if search else None,
        )

    async def get_transaction(self, transaction_id: str) -> SalesTransaction:
        tx = await self._repo.get_by_id(transaction_id, refresh=True)
        if not tx:
            raise NotFoundError("Sales transaction", transaction_id)
        return tx

    async def summarize(
        self,
        *,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        salesperson_id: str | None = None,
    ) -> list[dict]:
        return await self._repo.summary_by_status(
            date_from=date_from, date_to=date_to, salesperson_id=salesperson_id
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create_transaction(
        self, data: SalesTransactionCreate, *, actor_id: str | None = None
    ) -> SalesTransaction:
        vehicle = await self._vehicles.get_by_id(data.vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle", data.vehicle_id)

        fields = data.model_dump(exclude_none=True)
        if "cost_of_goods" not in fields and vehicle.acquisition_cost is not None:
            fields["cost_of_goods"] = vehicle.acquisition_cost
        if "salesperson_id" not in fields and actor_id:
            fields["salesperson_id"] = actor_id

        derived = financials.recompute_from(fields)
        tx = await self._repo.create(
            **fields, **derived.as_columns(), status=sales_lifecycle.PENDING
        )
        logger.info(
            "Sales transaction %s created for vehicle %s (total %s %s)",
            tx.id, tx.vehicle_id, tx.total_price, tx.currency,
        )
        return tx

    async def update_transaction(
        self, transaction_id: str, data: SalesTransactionUpdate
    ) -> SalesTransaction:
        tx = await self.get_transaction(transaction_id)
        patch = {
            name: value
            for name, value in data.model_dump(exclude_unset=True).items()
            if value is not None or name not in _REQUIRED_ON_UPDATE
        }
        sales_lifecycle.ensure_pending(tx, "update")
        if not patch:
            return tx

        values = sales_lifecycle.apply_update(tx, patch)
        updated = await self._repo.transition(
            transaction_id, expected_status=sales_lifecycle.PENDING, **values
        )
        if updated is None:
            await self._raise_lost_race(transaction_id, "update")
        return updated

    async def complete_transaction(self, transaction_id: str) -> SalesTransaction:
        tx = await self.get_transaction(transaction_id)
        values = sales_lifecycle.complete(tx, now=self._clock())
        return await self._close(tx.id, values, "complete", self._coordinator.on_completed)

    async def cancel_transaction(self, transaction_id: str) -> SalesTransaction:
        tx = await self.get_transaction(transaction_id)
        values = sales_lifecycle.cancel(tx, now=self._clock())
        return await self._close(tx.id, values, "cancel", self._coordinator.on_cancelled)

    async def delete_transaction(self, transaction_id: str) -> None:
        """Administrative hard delete. Vehicle availability is left as it is."""
        deleted = await self._repo.delete(transaction_id)
        if not deleted:
            raise NotFoundError("Sales transaction", transaction_id)
        logger.info("Sales transaction %s deleted", transaction_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _close(
        self,
        transaction_id: str,
        values: dict,
        action: str,
        effect: Callable[[SalesTransaction], Awaitable[None]],
    ) -> SalesTransaction:
        closed = await self._repo.transition(
            transaction_id, expected_status=sales_lifecycle.PENDING, **values
        )
        if closed is None:
            await self._raise_lost_race(transaction_id, action)
        await self._session.commit()
        logger.info("Sales transaction %s %s", closed.id, closed.status)

        status, vehicle_id = closed.status, closed.vehicle_id
        try:
            await effect(closed)
            await self._session.commit()
        except Exception as exc:
            await self._session.rollback()
            logger.error(
                "Vehicle %s not updated after sales transaction %s was %s: %s",
                vehicle_id, transaction_id, status, exc,
            )
            raise DownstreamEffectFailedError(transaction_id, status, str(exc)) from exc
        return closed

    async def _raise_lost_race(self, transaction_id: str, action: str) -> None:
        """The conditional write matched nothing: report why, holding no write lock."""
        await self._session.rollback()
        current = await self._repo.get_by_id(transaction_id, refresh=True)
        if current is None:
            raise NotFoundError("Sales transaction", transaction_id)
        raise InvalidStateTransitionError(transaction_id, current.status, action)
