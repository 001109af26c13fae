"""Create clients, loan records and their attachments"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_clients_and_loans"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
            server_onupdate=sa.func.now(),
        ),
    ]


def _owner_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "client_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "loan_record_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("loan_records.id", ondelete="CASCADE"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("id_number", sa.String(length=50), nullable=False),
        sa.Column("phone_number_1", sa.String(length=50), nullable=False),
        sa.Column("phone_number_2", sa.String(length=50), nullable=True),
        sa.Column("business_location", sa.String(length=255), nullable=False),
        sa.Column("permit_number", sa.String(length=100), nullable=True),
        sa.Column("home_address", sa.String(length=255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_clients_name", "clients", ["name"])
    op.create_index("ix_clients_id_number", "clients", ["id_number"], unique=True)

    op.create_table(
        "loan_records",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "client_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("loan_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("interest_rate", sa.Numeric(7, 3), nullable=False),
        sa.Column("registration_fee", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("loan_duration", sa.Integer(), nullable=False),
        sa.Column("application_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("disbursement_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("first_installment_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("last_installment_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("daily_payment_check", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("loan_officer", sa.String(length=150), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        *_timestamps(),
        sa.CheckConstraint("loan_amount >= 0", name="ck_loan_record_amount_nonneg"),
        sa.CheckConstraint("interest_rate >= 0", name="ck_loan_record_rate_nonneg"),
        sa.CheckConstraint("registration_fee >= 0", name="ck_loan_record_fee_nonneg"),
        sa.CheckConstraint("loan_duration >= 0", name="ck_loan_record_duration_nonneg"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'DISBURSED', 'ACTIVE', 'COMPLETED', 'DEFAULTED', 'REJECTED')",
            name="ck_loan_record_status",
        ),
    )
    for column in ("client_id", "application_date", "first_installment_date", "last_installment_date", "status"):
        op.create_index(f"ix_loan_records_{column}", "loan_records", [column])

    op.create_table(
        "guarantors",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("id_number", sa.String(length=50), nullable=False),
        sa.Column("phone_number", sa.String(length=50), nullable=False),
        *_owner_columns(),
        *_timestamps(),
    )
    op.create_table(
        "loan_references",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("phone_number", sa.String(length=50), nullable=False),
        sa.Column("relationship", sa.String(length=100), nullable=False),
        *_owner_columns(),
        *_timestamps(),
    )
    op.create_table(
        "media_files",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("file_type", sa.String(length=30), nullable=False),
        sa.Column("file_url", sa.Text(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        *_owner_columns(),
        *_timestamps(),
        sa.CheckConstraint("file_type IN ('CONTRACT_PDF', 'OTHER_DOCUMENT')", name="ck_media_file_type"),
    )
    for table in ("guarantors", "loan_references", "media_files"):
        op.create_index(f"ix_{table}_client_id", table, ["client_id"])
        op.create_index(f"ix_{table}_loan_record_id", table, ["loan_record_id"])


def downgrade() -> None:
    for table in ("media_files", "loan_references", "guarantors"):
        op.drop_index(f"ix_{table}_loan_record_id", table_name=table)
        op.drop_index(f"ix_{table}_client_id", table_name=table)
        op.drop_table(table)
    for column in ("status", "last_installment_date", "first_installment_date", "application_date", "client_id"):
        op.drop_index(f"ix_loan_records_{column}", table_name="loan_records")
    op.drop_table("loan_records")
    op.drop_index("ix_clients_id_number", table_name="clients")
    op.drop_index("ix_clients_name", table_name="clients")
    op.drop_table("clients")
