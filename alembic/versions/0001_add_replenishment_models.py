"""add replenishment models

Revision ID: 0001
Revises: None
Create Date: 2026-10-18 00:00:00.000000

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sku", sa.String(length=100), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("abc_grade", sa.String(length=1), nullable=True),
        sa.Column("xyz_grade", sa.String(length=1), nullable=True),
        sa.Column("lead_time_days", sa.Integer(), nullable=False, server_default=sa.text("7")),
        sa.Column("lead_time_stddev_days", sa.Float(), nullable=True),
        sa.Column("safety_stock", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("reorder_point", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )

    op.create_table(
        "inventory",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("product.id"), nullable=False, unique=True),
        sa.Column("current_stock", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "sales_record",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("product.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_sales_record_product_id", "sales_record", ["product_id"])
    op.create_index("ix_sales_record_date", "sales_record", ["date"])

    op.create_table(
        "reorder_suggestion",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("product.id"), nullable=False),
        sa.Column("scan_date", sa.Date(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("stock_status", sa.String(length=20), nullable=False),
        sa.Column("current_stock", sa.Integer(), nullable=False),
        sa.Column("daily_demand", sa.Float(), nullable=False),
        sa.Column("safety_stock", sa.Integer(), nullable=False),
        sa.Column("reorder_point", sa.Integer(), nullable=False),
        sa.Column("suggested_quantity", sa.Integer(), nullable=False),
        sa.Column("explanation", sa.Text(), nullable=True),
        sa.UniqueConstraint("product_id", "scan_date", name="uq_reorder_suggestion_product_scan_date"),
    )
    op.create_index("ix_reorder_suggestion_product_id", "reorder_suggestion", ["product_id"])


def downgrade() -> None:
    op.drop_index("ix_reorder_suggestion_product_id", table_name="reorder_suggestion")
    op.drop_table("reorder_suggestion")
    op.drop_index("ix_sales_record_date", table_name="sales_record")
    op.drop_index("ix_sales_record_product_id", table_name="sales_record")
    op.drop_table("sales_record")
    op.drop_table("inventory")
    op.drop_table("product")
