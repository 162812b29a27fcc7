"""Sales transaction lifecycle rules.

The ONLY allowed status transitions are:

  pending -> completed
  pending -> cancelled

completed and cancelled are terminal; there is no reopen. Reversing a closed
sale means creating a new transaction.

Functions here compute the column changes a transition produces. They never
touch the database; the service persists the result with a conditional write.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Protocol

from app.core.exceptions import (
    InvalidFinancialInputError,
    InvalidStateTransitionError,
    InvalidUpdateError,
)
from app.services import financials

PENDING = "pending"
COMPLETED = "completed"
CANCELLED = "cancelled"

STATUSES: tuple[str, ...] = (PENDING, COMPLETED, CANCELLED)

TERMINAL_STATES = frozenset({COMPLETED, CANCELLED})

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    PENDING: frozenset({COMPLETED, CANCELLED}),
}

# Fields a pending transaction may change through update
UPDATABLE_FIELDS = frozenset({
    "customer_name",
    "customer_email",
    "gross_price",
    "discount",
    "tax_rate",
    "cost_of_goods",
    "currency",
    "payment_method",
    "salesperson_id",
    "external_deal_id",
    "notes",
    "meta",
})

_ACTIONS = {COMPLETED: "complete", CANCELLED: "cancel"}


class TransactionLike(Protocol):
    id: Any
    status: str
    gross_price: Any
    discount: Any
    tax_rate: Any
    cost_of_goods: Any


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def ensure_transition(tx: TransactionLike, to_status: str) -> None:
    if not can_transition(from_status=tx.status, to_status=to_status):
        raise InvalidStateTransitionError(
            tx.id, tx.status, _ACTIONS.get(to_status, f"move to '{to_status}'")
        )


def ensure_pending(tx: TransactionLike, action: str) -> None:
    if tx.status != PENDING:
        raise InvalidStateTransitionError(tx.id, tx.status, action)


def current_inputs(tx: TransactionLike) -> dict[str, Any]:
    return {name: getattr(tx, name) for name in financials.INPUT_FIELDS}


def complete(tx: TransactionLike, *, now: datetime) -> dict[str, Any]:
    """Changes for pending -> completed, with derived fields recomputed fresh."""
    ensure_transition(tx, COMPLETED)
    values: dict[str, Any] = financials.recompute_from(current_inputs(tx)).as_columns()
    values.update(status=COMPLETED, closed_at=now)
    return values


def cancel(tx: TransactionLike, *, now: datetime) -> dict[str, Any]:
    """Changes for pending -> cancelled."""
    ensure_transition(tx, CANCELLED)
    return {"status": CANCELLED, "closed_at": now}


def apply_update(tx: TransactionLike, patch: Mapping[str, Any]) -> dict[str, Any]:
    """Validate *patch* against a pending transaction and return the full change set.

    The financial inputs are merged over the stored ones and recomputed, so
    the derived columns always travel with the inputs they came from.
    """
    ensure_pending(tx, "update")

    if "status" in patch or "closed_at" in patch:
        raise InvalidStateTransitionError(tx.id, tx.status, "change the status of")
    derived = [name for name in financials.DERIVED_FIELDS if name in patch]
    if derived:
        raise InvalidFinancialInputError(
            f"{', '.join(derived)} cannot be set directly; they are derived"
        )
    unknown = set(patch) - UPDATABLE_FIELDS
    if unknown:
        raise InvalidUpdateError(sorted(unknown))

    values = dict(patch)
    if "gross_price" in values and values["gross_price"] is None:
        raise InvalidFinancialInputError("gross_price cannot be cleared")
    if "discount" in values and values["discount"] is None:
        values["discount"] = financials.ZERO
    if "tax_rate" in values and values["tax_rate"] is None:
        values["tax_rate"] = financials.ZERO

    merged = {**current_inputs(tx), **{k: v for k, v in values.items() if k in financials.INPUT_FIELDS}}
    values.update(financials.recompute_from(merged).as_columns())
    return values
