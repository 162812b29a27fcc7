"""SQLAlchemy ORM models for Vehicles and their availability Statuses.

Vehicle CRUD lives outside this service; these models carry only the
columns the sales engine reads (existence, acquisition cost) or writes
(availability status and the sale-side bookkeeping).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.domain.mixins import TimestampMixin, UuidPrimaryKeyMixin


class Status(Base, UuidPrimaryKeyMixin, TimestampMixin):
    """Vehicle availability status (Available, Sold, Reserved, ...)."""

    __tablename__ = "statuses"

    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(60), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)


class Vehicle(Base, UuidPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "vehicles"

    stock_number: Mapped[Optional[str]] = mapped_column(String(50), unique=True, nullable=True)
    vin: Mapped[Optional[str]] = mapped_column(String(17), nullable=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    list_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    acquisition_cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    status_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("statuses.id"), nullable=True, index=True
    )

    # Set when a sale completes
    sale_transaction_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    actual_sale_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    sold_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
