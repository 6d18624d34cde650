"""Dashboard schema — customers, invoices, revenue.

Revision ID: 001_dashboard_schema
Revises: None
Create Date: 2026-10-16

Text primary keys generated by PostgreSQL (gen_random_uuid, core since PG 13).
Invoice amounts are integer cents.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_dashboard_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.String(36), primary_key=True, server_default=sa.text("gen_random_uuid()::text")),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("image_url", sa.String(255), nullable=False),
    )

    op.create_table(
        "invoices",
        sa.Column("id", sa.String(36), primary_key=True, server_default=sa.text("gen_random_uuid()::text")),
        sa.Column("customer_id", sa.String(36), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.CheckConstraint("status IN ('pending', 'paid')", name="ck_invoices_status"),
    )
    op.create_index("ix_invoices_customer_id", "invoices", ["customer_id"])
    op.create_index("ix_invoices_date", "invoices", ["date"])

    op.create_table(
        "revenue",
        sa.Column("month", sa.String(4), primary_key=True),
        sa.Column("revenue", sa.Integer, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("revenue")
    op.drop_index("ix_invoices_date", table_name="invoices")
    op.drop_index("ix_invoices_customer_id", table_name="invoices")
    op.drop_table("invoices")
    op.drop_table("customers")
