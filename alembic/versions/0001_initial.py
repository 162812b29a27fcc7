"""statuses, vehicles and sales_transactions

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 09:00:00

"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_STATUSES = [
    ("Available", "available", "Ready to sell", True),
    ("Reserved", "reserved", "Held for a customer", False),
    ("Pending", "pending", "Sale in progress", False),
    ("Sold", "sold", "Sale completed", False),
]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    statuses = op.create_table(
        "statuses",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("slug", sa.String(length=60), nullable=False),
        sa.Column("description", sa.String(length=300), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_statuses_is_default", "statuses", ["is_default"])
    op.create_index("ix_statuses_active", "statuses", ["active"])

    op.create_table(
        "vehicles",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("stock_number", sa.String(length=50), nullable=True),
        sa.Column("vin", sa.String(length=17), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("list_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("acquisition_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("status_id", sa.String(length=36), sa.ForeignKey("statuses.id"), nullable=True),
        sa.Column("sale_transaction_id", sa.String(length=36), nullable=True),
        sa.Column("actual_sale_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("sold_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("stock_number"),
    )
    op.create_index("ix_vehicles_status_id", "vehicles", ["status_id"])

    op.create_table(
        "sales_transactions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("vehicle_id", sa.String(length=36), nullable=False),
        sa.Column("customer_name", sa.String(length=120), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=True),
        sa.Column("gross_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False),
        sa.Column("tax_rate", sa.Numeric(6, 5), nullable=False),
        sa.Column("cost_of_goods", sa.Numeric(12, 2), nullable=True),
        sa.Column("sale_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("tax_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("margin", sa.Numeric(12, 2), nullable=True),
        sa.Column("margin_percent", sa.Numeric(20, 6), nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("salesperson_id", sa.String(length=100), nullable=True),
        sa.Column("external_deal_id", sa.String(length=100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("meta", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sales_transactions_vehicle_id", "sales_transactions", ["vehicle_id"])
    op.create_index("ix_sales_transactions_status", "sales_transactions", ["status"])
    op.create_index("ix_sales_transactions_closed_at", "sales_transactions", ["closed_at"])
    op.create_index("ix_sales_transactions_external_deal_id", "sales_transactions", ["external_deal_id"])
    op.create_index(
        "ix_sales_transactions_status_created_at", "sales_transactions", ["status", "created_at"]
    )
    op.create_index(
        "ix_sales_transactions_salesperson_status", "sales_transactions", ["salesperson_id", "status"]
    )

    op.bulk_insert(
        statuses,
        [
            {
                "id": str(uuid.uuid4()),
                "name": name,
                "slug": slug,
                "description": description,
                "is_default": is_default,
                "active": True,
            }
            for name, slug, description, is_default in _STATUSES
        ],
    )


def downgrade() -> None:
    op.drop_table("sales_transactions")
    op.drop_table("vehicles")
    op.drop_table("statuses")
