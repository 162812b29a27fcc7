"""Sales transaction Pydantic schemas (request DTOs and response models).

Request schemas check shape only (types, enums, string lengths). Money
ranges (non-negative amounts, discount <= gross, tax rate in [0, 1]) are
enforced by the financial calculator so they surface as
INVALID_FINANCIAL_INPUT.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import EmailStr, Field, StringConstraints, field_validator, model_validator

from app.schemas.common import CamelModel, Money

Currency = Literal["CAD", "USD"]
PaymentMethod = Literal["cash", "finance", "lease"]
TransactionStatus = Literal["pending", "completed", "cancelled"]

CustomerName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]


class _SalesTransactionInput(CamelModel):
    """Normalization shared by the create and update bodies."""

    @model_validator(mode="before")
    @classmethod
    def _legacy_sale_price(cls, values: Any) -> Any:
        """Accept ``salePrice`` as the pre-discount price when ``grossPrice`` is absent."""
        if not isinstance(values, dict):
            return values
        values = dict(values)
        sale = values.pop("salePrice", None)
        if sale is None:
            sale = values.pop("sale_price", None)
        if sale is None:
            return values
        if values.get("grossPrice") is not None or values.get("gross_price") is not None:
            raise ValueError("send grossPrice only; salePrice is derived from grossPrice - discount")
        values["grossPrice"] = sale
        return values

    @field_validator("customer_email", check_fields=False)
    @classmethod
    def _lower_email(cls, value: str | None) -> str | None:
        return value.lower() if value else value


class SalesTransactionCreate(_SalesTransactionInput):
    vehicle_id: str = Field(min_length=1, max_length=36)
    customer_name: CustomerName
    customer_email: EmailStr | None = None
    gross_price: Decimal
    discount: Decimal | None = None
    tax_rate: Decimal | None = None
    cost_of_goods: Decimal | None = None
    currency: Currency = "CAD"
    payment_method: PaymentMethod | None = None
    salesperson_id: str | None = Field(default=None, max_length=100)
    external_deal_id: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=500)
    meta: dict[str, Any] | None = None


class SalesTransactionUpdate(_SalesTransactionInput):
    """Partial update; only fields present in the body are applied."""

    customer_name: CustomerName | None = None
    customer_email: EmailStr | None = None
    gross_price: Decimal | None = None
    discount: Decimal | None = None
    tax_rate: Decimal | None = None
    cost_of_goods: Decimal | None = None
    currency: Currency | None = None
    payment_method: PaymentMethod | None = None
    salesperson_id: str | None = Field(default=None, max_length=100)
    external_deal_id: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=500)
    meta: dict[str, Any] | None = None


class SalesTransactionOut(CamelModel):
    id: str
    vehicle_id: str
    customer_name: str
    customer_email: str | None = None
    gross_price: Money
    discount: Money
    sale_price: Money
    tax_rate: Money
    tax_amount: Money
    total_price: Money
    cost_of_goods: Money | None = None
    margin: Money | None = None
    margin_percent: Money | None = None
    currency: Currency
    payment_method: PaymentMethod | None = None
    status: TransactionStatus
    closed_at: datetime | None = None
    salesperson_id: str | None = None
    external_deal_id: str | None = None
    notes: str | None = None
    meta: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime


class SalesSummaryRow(CamelModel):
    status: TransactionStatus
    count: int
    total_revenue: Money
    total_gross: Money
    total_margin: Money
