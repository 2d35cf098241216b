"""create dealership, customer, vehicle and sale tables

Revision ID: 202610010001
Revises:
Create Date: 2026-10-01 00:01:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "202610010001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "dealership",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=512), nullable=False),
        sa.Column("parent_dealership_id", sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["parent_dealership_id"], ["dealership.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_dealership_parent", "dealership", ["parent_dealership_id"], unique=False)

    op.create_table(
        "customer",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("dealership_id", sa.String(length=64), nullable=False),
        sa.Column("first_name", sa.String(length=128), nullable=False),
        sa.Column("last_name", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["dealership_id"], ["dealership.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_customer_dealership_id", "customer", ["dealership_id", "id"], unique=False)
    op.create_index("ix_customer_dealership_last_name", "customer", ["dealership_id", "last_name"], unique=False)

    op.create_table(
        "vehicle",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("dealership_id", sa.String(length=64), nullable=False),
        sa.Column("make", sa.String(length=128), nullable=False),
        sa.Column("model", sa.String(length=128), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["dealership_id"], ["dealership.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_vehicle_dealership_id", "vehicle", ["dealership_id", "id"], unique=False)
    op.create_index("ix_vehicle_dealership_make_model", "vehicle", ["dealership_id", "make", "model"], unique=False)

    op.create_table(
        "sale",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("dealership_id", sa.String(length=64), nullable=False),
        sa.Column("vehicle_id", sa.String(length=64), nullable=False),
        sa.Column("customer_id", sa.String(length=64), nullable=False),
        sa.Column("sale_date", sa.Date(), nullable=False),
        sa.Column("purchase_net_amount", sa.Numeric(14, 2), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["dealership_id"], ["dealership.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicle.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["customer_id"], ["customer.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sale_dealership_id", "sale", ["dealership_id", "id"], unique=False)
    op.create_index("ix_sale_dealership_date", "sale", ["dealership_id", "sale_date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_sale_dealership_date", table_name="sale")
    op.drop_index("ix_sale_dealership_id", table_name="sale")
    op.drop_table("sale")
    op.drop_index("ix_vehicle_dealership_make_model", table_name="vehicle")
    op.drop_index("ix_vehicle_dealership_id", table_name="vehicle")
    op.drop_table("vehicle")
    op.drop_index("ix_customer_dealership_last_name", table_name="customer")
    op.drop_index("ix_customer_dealership_id", table_name="customer")
    op.drop_table("customer")
    op.drop_index("ix_dealership_parent", table_name="dealership")
    op.drop_table("dealership")
