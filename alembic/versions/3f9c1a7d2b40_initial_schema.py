"""initial schema

Revision ID: 3f9c1a7d2b40
Revises:
Create Date: 2026-10-17
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3f9c1a7d2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "bills",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("owner_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("customer_name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("bill_date", sa.String(10), nullable=False),
        sa.Column("total", sa.Float, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_bills_owner_updated", "bills", ["owner_id", "updated_at"])

    op.create_table(
        "bill_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("bill_id", sa.Integer, sa.ForeignKey("bills.id", ondelete="CASCADE"), nullable=False),
        sa.Column("item_key", sa.String(32), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("feet", sa.Float, nullable=False, server_default="0"),
        sa.Column("inches", sa.Float, nullable=False, server_default="0"),
        sa.Column("quantity", sa.Float, nullable=True),
        sa.Column("rate", sa.Float, nullable=False, server_default="0"),
        sa.Column("amount", sa.Float, nullable=False, server_default="0"),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
    )

    op.create_table(
        "password_reset_otps",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("code", sa.String(6), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("expires_at", sa.DateTime, nullable=False),
        sa.Column("verified", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_password_reset_otps_email", "password_reset_otps", ["email"])

    op.create_table(
        "templates",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("owner_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("company_name", sa.Text, nullable=False, server_default=""),
        sa.Column("company_subtitle", sa.Text, nullable=False, server_default=""),
        sa.Column("company_address", sa.Text, nullable=False, server_default=""),
        sa.Column("company_phone", sa.String(50), nullable=False, server_default=""),
        sa.Column("company_email", sa.String(255), nullable=False, server_default=""),
        sa.Column("company_website", sa.String(255), nullable=False, server_default=""),
        sa.Column("primary_color", sa.String(7), nullable=False, server_default="#2563EB"),
        sa.Column("secondary_color", sa.String(7), nullable=False, server_default="#64748B"),
        sa.Column("accent_color", sa.String(7), nullable=False, server_default="#059669"),
        sa.Column("text_color", sa.String(7), nullable=False, server_default="#1F2937"),
        sa.Column("background_color", sa.String(7), nullable=False, server_default="#FFFFFF"),
        sa.Column("header_style", sa.String(10), nullable=False, server_default="modern"),
        sa.Column("font_size", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("show_company_address", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("show_due_date", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("show_payment_terms", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("show_footer", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("show_item_numbers", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("show_measurements", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("payment_terms", sa.Text, nullable=False, server_default=""),
        sa.Column("footer_text", sa.Text, nullable=False, server_default=""),
        sa.Column("invoice_prefix", sa.String(20), nullable=False, server_default="INV"),
        sa.Column("due_days", sa.Integer, nullable=False, server_default="30"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_templates_owner", "templates", ["owner_id"])


def downgrade() -> None:
    op.drop_index("ix_templates_owner", table_name="templates")
    op.drop_table("templates")
    op.drop_index("ix_password_reset_otps_email", table_name="password_reset_otps")
    op.drop_table("password_reset_otps")
    op.drop_table("bill_items")
    op.drop_index("ix_bills_owner_updated", table_name="bills")
    op.drop_table("bills")
    op.drop_table("users")
