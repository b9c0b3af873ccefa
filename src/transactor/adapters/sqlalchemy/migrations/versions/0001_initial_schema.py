"""Initial schema: bundles, records, field schema, transaction types and transactions.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial_schema"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "bundle",
        sa.Column("record_type", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("label", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("record_type", "name", name=op.f("pk_bundle")),
    )
    op.create_table(
        "field_storage",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("record_type", sa.String(length=64), nullable=False),
        sa.Column("field_name", sa.String(length=32), nullable=False),
        sa.Column("field_type", sa.String(length=64), nullable=False),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_field_storage")),
        sa.UniqueConstraint(
            "record_type", "field_name", name=op.f("uq_field_storage_record_type")
        ),
    )
    op.create_table(
        "field_attachment",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("record_type", sa.String(length=64), nullable=False),
        sa.Column("bundle", sa.String(length=64), nullable=False),
        sa.Column("field_name", sa.String(length=32), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("required", sa.Boolean(), nullable=False),
        sa.Column("handler_settings", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_field_attachment")),
        sa.UniqueConstraint(
            "record_type",
            "bundle",
            "field_name",
            name=op.f("uq_field_attachment_record_type"),
        ),
    )
    op.create_table(
        "display",
        sa.Column("record_type", sa.String(length=64), nullable=False),
        sa.Column("bundle", sa.String(length=64), nullable=False),
        sa.Column(
            "context",
            sa.Enum("form", "view", name="displaycontext", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("mode", sa.String(length=64), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("components", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint(
            "record_type", "bundle", "context", "mode", name=op.f("pk_display")
        ),
    )
    op.create_table(
        "record",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("record_type", sa.String(length=64), nullable=False),
        sa.Column("bundle", sa.String(length=64), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("field_values", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_record")),
    )
    op.create_index(op.f("ix_record_record_type"), "record", ["record_type"], unique=False)
    op.create_table(
        "transaction_type",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("target_entity_type", sa.String(length=64), nullable=False),
        sa.Column("transactor_id", sa.String(length=64), nullable=True),
        sa.Column("transactor_settings", sa.JSON(), nullable=False),
        sa.Column("bundles", sa.JSON(), nullable=False),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_transaction_type")),
    )
    op.create_table(
        "transaction",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type_id", sa.String(length=64), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "pending", "executed", name="transactionstatus", native_enum=False, length=16
            ),
            nullable=False,
        ),
        sa.Column("field_values", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("executed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("executed_by", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(
            ["type_id"],
            ["transaction_type.id"],
            name=op.f("fk_transaction_type_id_transaction_type"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_transaction")),
    )
    op.create_index(
        "ix_transaction_type_target",
        "transaction",
        ["type_id", "target_id", "status", "executed_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_transaction_type_target", table_name="transaction")
    op.drop_table("transaction")
    op.drop_table("transaction_type")
    op.drop_index(op.f("ix_record_record_type"), table_name="record")
    op.drop_table("record")
    op.drop_table("display")
    op.drop_table("field_attachment")
    op.drop_table("field_storage")
    op.drop_table("bundle")
