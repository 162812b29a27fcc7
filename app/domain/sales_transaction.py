"""SQLAlchemy ORM model for Sales Transactions.

One row per sale attempt. Derived money columns (sale_price, tax_amount,
total_price, margin, margin_percent) are written only together with a
recompute by :mod:`app.services.financials`.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.domain.mixins import TimestampMixin, UuidPrimaryKeyMixin


class SalesTransaction(Base, UuidPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "sales_transactions"
    __table_args__ = (
        Index("ix_sales_transactions_status_created_at", "status", "created_at"),
        Index("ix_sales_transactions_salesperson_status", "salesperson_id", "status"),
    )

    # vehicle_id stored as plain reference: the sale does not own the vehicle
    vehicle_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    customer_name: Mapped[str] = mapped_column(String(120), nullable=False)
    customer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Inputs
    gross_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(Numeric(6, 5), default=Decimal("0"), nullable=False)
    cost_of_goods: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    # Derived
    sale_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    margin: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    margin_percent: Mapped[Optional[Decimal]] = mapped_column(Numeric(20, 6), nullable=True)

    # "CAD" | "USD"
    currency: Mapped[str] = mapped_column(String(3), default="CAD", nullable=False)
    # "cash" | "finance" | "lease"
    payment_method: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # "pending" | "completed" | "cancelled"
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False, index=True)
    closed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    salesperson_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    external_deal_id: Mapped[Optional[str]] = mapped_column(String(100), index=True, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    meta: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
