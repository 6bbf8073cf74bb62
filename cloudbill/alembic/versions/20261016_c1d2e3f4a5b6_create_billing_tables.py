"""create billing tables

Revision ID: c1d2e3f4a5b6
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "c1d2e3f4a5b6"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
    ]


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("(CURRENT_TIMESTAMP)"),
        nullable=True,
    )


def upgrade() -> None:
    op.create_table(
        "billing_addresses",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("address_line1", sa.String(length=255), nullable=False),
        sa.Column("address_line2", sa.String(length=255), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=False),
        sa.Column("state", sa.String(length=100), nullable=False),
        sa.Column("state_code", sa.String(length=2), nullable=True),
        sa.Column("postal_code", sa.String(length=20), nullable=False),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("gst_number", sa.String(length=15), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_billing_addresses_account_id"), "billing_addresses", ["account_id"]
    )

    op.create_table(
        "hsn_codes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("service_type", sa.String(length=100), nullable=False),
        sa.Column("hsn_code", sa.String(length=20), nullable=False),
        sa.Column("sac_code", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("gst_rate", sa.Integer(), nullable=False, server_default="18"),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_hsn_codes_service_type"), "hsn_codes", ["service_type"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("invoice_number", sa.String(length=50), nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("billing_address_id", sa.String(length=36), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("billing_period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("billing_period_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("subtotal_amount", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("cgst_amount", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("sgst_amount", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("igst_amount", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("discount_amount", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("tax_type", sa.String(length=20), nullable=False),
        sa.Column("gst_rate", sa.Integer(), nullable=False, server_default="18"),
        sa.Column("hsn_code", sa.String(length=20), nullable=False),
        sa.Column("sac_code", sa.String(length=20), nullable=False),
        sa.Column("place_of_supply", sa.String(length=100), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="INR"),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["billing_address_id"], ["billing_addresses.id"], ondelete="RESTRICT"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_invoices_invoice_number"), "invoices", ["invoice_number"], unique=True
    )
    op.create_index(op.f("ix_invoices_account_id"), "invoices", ["account_id"])
    op.create_index(op.f("ix_invoices_status"), "invoices", ["status"])

    op.create_table(
        "invoice_line_items",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("invoice_id", sa.String(length=36), nullable=False),
        sa.Column("resource_type", sa.String(length=50), nullable=False),
        sa.Column("resource_id", sa.String(length=255), nullable=True),
        sa.Column("resource_name", sa.String(length=255), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("quantity", sa.Numeric(precision=16, scale=2), nullable=False),
        sa.Column("unit", sa.String(length=50), nullable=False),
        sa.Column("unit_price", sa.BigInteger(), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("usage_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("usage_end", sa.DateTime(timezone=True), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_invoice_line_items_invoice_id"), "invoice_line_items", ["invoice_id"]
    )

    op.create_table(
        "tax_calculations",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("invoice_id", sa.String(length=36), nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("supplier_state", sa.String(length=100), nullable=False),
        sa.Column("supplier_state_code", sa.String(length=2), nullable=False),
        sa.Column("customer_state", sa.String(length=100), nullable=False),
        sa.Column("customer_state_code", sa.String(length=2), nullable=True),
        sa.Column("tax_type", sa.String(length=20), nullable=False),
        sa.Column("taxable_amount", sa.BigInteger(), nullable=False),
        sa.Column("cgst_rate", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("sgst_rate", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("igst_rate", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("cgst_amount", sa.BigInteger(), nullable=False),
        sa.Column("sgst_amount", sa.BigInteger(), nullable=False),
        sa.Column("igst_amount", sa.BigInteger(), nullable=False),
        sa.Column("total_tax_amount", sa.BigInteger(), nullable=False),
        sa.Column("gst_rate", sa.Integer(), nullable=False),
        sa.Column("hsn_sac_code", sa.String(length=20), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invoice_id"),
    )
    op.create_index(op.f("ix_tax_calculations_account_id"), "tax_calculations", ["account_id"])

    op.create_table(
        "usage_records",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("account_id", sa.String(length=255), nullable=False),
        sa.Column("resource_type", sa.String(length=50), nullable=False),
        sa.Column("resource_id", sa.String(length=255), nullable=False),
        sa.Column("resource_name", sa.String(length=255), nullable=False),
        sa.Column("metric_type", sa.String(length=50), nullable=False),
        sa.Column("quantity", sa.Numeric(precision=24, scale=10), nullable=False),
        sa.Column("unit", sa.String(length=50), nullable=False),
        sa.Column("unit_price", sa.Numeric(precision=24, scale=10), nullable=False),
        sa.Column("total_cost", sa.Numeric(precision=24, scale=10), nullable=False),
        sa.Column("period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("period_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("invoice_id", sa.String(length=36), nullable=True),
        sa.Column("billed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("metadata", sa.JSON(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_usage_records_account_id"), "usage_records", ["account_id"])
    op.create_index(op.f("ix_usage_records_resource_type"), "usage_records", ["resource_type"])
    op.create_index(op.f("ix_usage_records_period_end"), "usage_records", ["period_end"])
    op.create_index(op.f("ix_usage_records_invoice_id"), "usage_records", ["invoice_id"])
    op.create_index(
        "ix_usage_records_account_billed", "usage_records", ["account_id", "billed"]
    )


def downgrade() -> None:
    op.drop_index("ix_usage_records_account_billed", table_name="usage_records")
    op.drop_index(op.f("ix_usage_records_invoice_id"), table_name="usage_records")
    op.drop_index(op.f("ix_usage_records_period_end"), table_name="usage_records")
    op.drop_index(op.f("ix_usage_records_resource_type"), table_name="usage_records")
    op.drop_index(op.f("ix_usage_records_account_id"), table_name="usage_records")
    op.drop_table("usage_records")

    op.drop_index(op.f("ix_tax_calculations_account_id"), table_name="tax_calculations")
    op.drop_table("tax_calculations")

    op.drop_index(op.f("ix_invoice_line_items_invoice_id"), table_name="invoice_line_items")
    op.drop_table("invoice_line_items")

    op.drop_index(op.f("ix_invoices_status"), table_name="invoices")
    op.drop_index(op.f("ix_invoices_account_id"), table_name="invoices")
    op.drop_index(op.f("ix_invoices_invoice_number"), table_name="invoices")
    op.drop_table("invoices")

    op.drop_index(op.f("ix_hsn_codes_service_type"), table_name="hsn_codes")
    op.drop_table("hsn_codes")

    op.drop_index(op.f("ix_billing_addresses_account_id"), table_name="billing_addresses")
    op.drop_table("billing_addresses")
