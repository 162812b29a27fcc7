"""Domain package — all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  sales_transaction.py  — one row per sale attempt (owned by the sales engine)
  vehicle.py            — Vehicle + availability Status (external, reduced to what sales touch)
  mixins.py             — Shared UUID primary key and timestamp mixins
"""

from app.domain.sales_transaction import SalesTransaction
from app.domain.vehicle import Status, Vehicle

__all__ = [
    "SalesTransaction",
    "Status",
    "Vehicle",
]
