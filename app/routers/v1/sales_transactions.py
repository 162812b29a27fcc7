"""Sales transaction router — /api/v1/sales-transactions.

Routers only handle HTTP: query parsing, auth, and response envelopes.
Every lifecycle rule lives in :mod:`app.services.sales_transaction`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.pagination import PaginationParams
from app.core.response import DataResponse, ListResponse, error_responses, paginated, single
from app.core.security import Actor, get_current_actor
from app.db.base import get_db
from app.schemas.sales_transaction import (
    SalesSummaryRow,
    SalesTransactionCreate,
    SalesTransactionOut,
    SalesTransactionUpdate,
    TransactionStatus,
)
from app.services.sales_transaction import SalesTransactionService

router = APIRouter(
    prefix="/sales-transactions",
    tags=["Sales Transactions"],
    dependencies=[Depends(get_current_actor)],
    responses=error_responses(401),
)


# ------------------------------------------------------------------
# Dependency: one service per request, bound to the request session
# ------------------------------------------------------------------

def get_sales_service(session: AsyncSession = Depends(get_db)) -> SalesTransactionService:
    return SalesTransactionService(session)


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("", response_model=ListResponse[SalesTransactionOut])
async def list_sales_transactions(
    filter_status: Optional[TransactionStatus] = Query(default=None, alias="status"),
    salesperson: Optional[str] = Query(default=None, description="Salesperson id"),
    vehicle: Optional[str] = Query(default=None, description="Vehicle id"),
    date_from: Optional[datetime] = Query(default=None, alias="from"),
    date_to: Optional[datetime] = Query(default=None, alias="to"),
    search: Optional[str] = Query(default=None, description="Customer name/email or deal id"),
    pagination: PaginationParams = Depends(),
    svc: SalesTransactionService = Depends(get_sales_service),
):
    """List sales transactions (paginated, newest first)."""
    items, total = await svc.list_transactions(
        pagination,
        status=filter_status,
        salesperson_id=salesperson,
        vehicle_id=vehicle,
        date_from=date_from,
        date_to=date_to,
        search=search,
    )
    return paginated(
        [SalesTransactionOut.model_validate(tx) for tx in items],
        total, pagination,
    )


@router.get("/summary", response_model=DataResponse[list[SalesSummaryRow]])
async def sales_summary(
    date_from: Optional[datetime] = Query(default=None, alias="from"),
    date_to: Optional[datetime] = Query(default=None, alias="to"),
    salesperson: Optional[str] = Query(default=None),
    svc: SalesTransactionService = Depends(get_sales_service),
):
    """Count, revenue, gross and margin per status."""
    rows = await svc.summarize(date_from=date_from, date_to=date_to, salesperson_id=salesperson)
    return single([SalesSummaryRow.model_validate(row) for row in rows])


@router.get(
    "/{transaction_id}", response_model=DataResponse[SalesTransactionOut], responses=error_responses(404)
)
async def get_sales_transaction(
    transaction_id: str,
    svc: SalesTransactionService = Depends(get_sales_service),
):
    tx = await svc.get_transaction(transaction_id)
    return single(SalesTransactionOut.model_validate(tx))


@router.post(
    "",
    response_model=DataResponse[SalesTransactionOut],
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(404, 422),
)
async def create_sales_transaction(
    body: SalesTransactionCreate,
    actor: Actor = Depends(get_current_actor),
    svc: SalesTransactionService = Depends(get_sales_service),
):
    """Create a pending sales transaction for an existing vehicle."""
    tx = await svc.create_transaction(body, actor_id=actor.id)
    return single(SalesTransactionOut.model_validate(tx))


@router.patch(
    "/{transaction_id}",
    response_model=DataResponse[SalesTransactionOut],
    responses=error_responses(404, 409, 422),
)
async def update_sales_transaction(
    transaction_id: str,
    body: SalesTransactionUpdate,
    svc: SalesTransactionService = Depends(get_sales_service),
):
    """Update a pending transaction; totals are recomputed."""
    tx = await svc.update_transaction(transaction_id, body)
    return single(SalesTransactionOut.model_validate(tx))


@router.post(
    "/{transaction_id}/complete",
    response_model=DataResponse[SalesTransactionOut],
    responses=error_responses(404, 409, 422, 502),
)
async def complete_sales_transaction(
    transaction_id: str,
    svc: SalesTransactionService = Depends(get_sales_service),
):
    """Complete a pending sale and mark its vehicle sold."""
    tx = await svc.complete_transaction(transaction_id)
    return single(SalesTransactionOut.model_validate(tx))


@router.post(
    "/{transaction_id}/cancel",
    response_model=DataResponse[SalesTransactionOut],
    responses=error_responses(404, 409, 502),
)
async def cancel_sales_transaction(
    transaction_id: str,
    svc: SalesTransactionService = Depends(get_sales_service),
):
    """Cancel a pending sale and release any hold on its vehicle."""
    tx = await svc.cancel_transaction(transaction_id)
    return single(SalesTransactionOut.model_validate(tx))


@router.delete(
    "/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT, responses=error_responses(404)
)
async def delete_sales_transaction(
    transaction_id: str,
    svc: SalesTransactionService = Depends(get_sales_service),
):
    """Hard delete (administrative). Does not revert the vehicle's status."""
    await svc.delete_transaction(transaction_id)
