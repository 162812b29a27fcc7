"""Financial calculator for sales transactions — pure, no I/O.

Derives every computed money field of a sale from four inputs:

  sale_price     = gross_price - discount
  tax_amount     = round_half_up(sale_price * tax_rate, 2)
  total_price    = sale_price + tax_amount
  margin         = sale_price - cost_of_goods          (only with a cost)
  margin_percent = round_half_up(margin / sale_price, 6)  (only with a margin and sale_price > 0)

Inputs must fit their stored columns exactly: money amounts carry at most 2
decimal places and tax_rate at most 5, so recomputing from a stored row always
reproduces its stored derived fields. Arithmetic is Decimal; tax_amount and
margin_percent are the only rounded values. Out-of-range inputs raise
:class:`InvalidFinancialInputError` and are never clamped or truncated.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from app.core.exceptions import InvalidFinancialInputError

CENT = Decimal("0.01")
RATE_STEP = Decimal("0.00001")
PERCENT_STEP = Decimal("0.000001")
ZERO = Decimal("0")
ONE = Decimal("1")

# Largest value a Numeric(12, 2) money column holds
MAX_AMOUNT = Decimal("9999999999.99")

# Columns produced by recompute(); never accepted from callers
DERIVED_FIELDS: tuple[str, ...] = (
    "sale_price",
    "tax_amount",
    "total_price",
    "margin",
    "margin_percent",
)
INPUT_FIELDS: tuple[str, ...] = ("gross_price", "discount", "tax_rate", "cost_of_goods")


@dataclass(frozen=True, slots=True)
class FinancialInputs:
    gross_price: Decimal
    discount: Decimal = ZERO
    tax_rate: Decimal = ZERO
    cost_of_goods: Optional[Decimal] = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "FinancialInputs":
        """Build inputs from a column mapping; missing discount/tax default to zero."""
        gross = values.get("gross_price")
        if gross is None:
            raise InvalidFinancialInputError("gross_price is required")
        discount = values.get("discount")
        tax_rate = values.get("tax_rate")
        cost = values.get("cost_of_goods")
        return cls(
            gross_price=_to_decimal("gross_price", gross),
            discount=ZERO if discount is None else _to_decimal("discount", discount),
            tax_rate=ZERO if tax_rate is None else _to_decimal("tax_rate", tax_rate),
            cost_of_goods=None if cost is None else _to_decimal("cost_of_goods", cost),
        )


@dataclass(frozen=True, slots=True)
class DerivedFinancials:
    sale_price: Decimal
    tax_amount: Decimal
    total_price: Decimal
    margin: Optional[Decimal] = None
    margin_percent: Optional[Decimal] = None

    def as_columns(self) -> dict[str, Optional[Decimal]]:
        return {name: getattr(self, name) for name in DERIVED_FIELDS}


def _to_decimal(name: str, value: Any) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise InvalidFinancialInputError(f"{name} must be a number")
    elif isinstance(value, (int, float, str)):
        try:
            # str() keeps floats like 0.13 from expanding to their binary value
            result = Decimal(str(value))
        except InvalidOperation:
            raise InvalidFinancialInputError(f"{name} must be a number") from None
    else:
        raise InvalidFinancialInputError(f"{name} must be a number")

    if not result.is_finite():
        raise InvalidFinancialInputError(f"{name} must be a finite number")
    return result


def _fits(value: Decimal, step: Decimal) -> bool:
    """True when *value* has no digits below *step*."""
    try:
        return value == value.quantize(step)
    except InvalidOperation:
        return False


def _check_amount(name: str, value: Decimal) -> None:
    if value < ZERO:
        raise InvalidFinancialInputError(f"{name} must be >= 0")
    if value > MAX_AMOUNT:
        raise InvalidFinancialInputError(f"{name} must be <= {MAX_AMOUNT}")
    if not _fits(value, CENT):
        raise InvalidFinancialInputError(f"{name} must have at most 2 decimal places")


def validate(inputs: FinancialInputs) -> None:
    """Raise InvalidFinancialInputError when any input is out of range or too precise."""
    _check_amount("gross_price", inputs.gross_price)
    _check_amount("discount", inputs.discount)
    if inputs.discount > inputs.gross_price:
        raise InvalidFinancialInputError(
            f"discount ({inputs.discount}) cannot exceed gross_price ({inputs.gross_price})"
        )
    if not ZERO <= inputs.tax_rate <= ONE:
        raise InvalidFinancialInputError("tax_rate must be between 0 and 1")
    if not _fits(inputs.tax_rate, RATE_STEP):
        raise InvalidFinancialInputError("tax_rate must have at most 5 decimal places")
    if inputs.cost_of_goods is not None:
        _check_amount("cost_of_goods", inputs.cost_of_goods)


def round_currency(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def recompute(inputs: FinancialInputs) -> DerivedFinancials:
    """Validate *inputs* and derive sale, tax, total and margin figures."""
    validate(inputs)

    sale_price = inputs.gross_price - inputs.discount
    tax_amount = round_currency(sale_price * inputs.tax_rate)
    total_price = sale_price + tax_amount
    if total_price > MAX_AMOUNT:
        raise InvalidFinancialInputError(f"total_price must be <= {MAX_AMOUNT}")

    margin: Optional[Decimal] = None
    margin_percent: Optional[Decimal] = None
    if inputs.cost_of_goods is not None:
        margin = sale_price - inputs.cost_of_goods
        if sale_price > ZERO:
            margin_percent = (margin / sale_price).quantize(PERCENT_STEP, rounding=ROUND_HALF_UP)

    return DerivedFinancials(
        sale_price=sale_price,
        tax_amount=tax_amount,
        total_price=total_price,
        margin=margin,
        margin_percent=margin_percent,
    )


def recompute_from(values: Mapping[str, Any]) -> DerivedFinancials:
    """Shortcut for ``recompute(FinancialInputs.from_mapping(values))``."""
    return recompute(FinancialInputs.from_mapping(values))
