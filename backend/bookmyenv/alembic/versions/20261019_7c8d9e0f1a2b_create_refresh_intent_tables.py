"""create refresh intent and history tables

Revision ID: 7c8d9e0f1a2b
Revises: 3f9a1c2d4b5e
Create Date: 2026-10-19 09:10:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "7c8d9e0f1a2b"
down_revision = "3f9a1c2d4b5e"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "refresh_intents",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.String(length=36), nullable=False),
        sa.Column("entity_name", sa.String(length=255), nullable=True),
        sa.Column(
            "intent_status", sa.String(length=50), nullable=False, server_default="REQUESTED"
        ),
        sa.Column("planned_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("planned_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("refresh_type", sa.String(length=50), nullable=False),
        sa.Column("source_environment_name", sa.String(length=255), nullable=True),
        sa.Column("requires_downtime", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("estimated_downtime_minutes", sa.Integer(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("business_justification", sa.Text(), nullable=True),
        sa.Column("requires_approval", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("change_ticket_ref", sa.String(length=100), nullable=True),
        sa.Column("requested_by_user_id", sa.String(length=36), nullable=True),
        sa.Column("approved_by_user_id", sa.String(length=36), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approval_notes", sa.Text(), nullable=True),
        sa.Column("rejected_by_user_id", sa.String(length=36), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("execution_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("execution_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("execution_notes", sa.Text(), nullable=True),
        sa.Column("notification_groups", sa.JSON(), nullable=False),
        sa.Column("notification_sent_dates", sa.JSON(), nullable=False),
        sa.Column("reminder_version", sa.Integer(), nullable=False, server_default="0"),
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
        sa.ForeignKeyConstraint(["requested_by_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["approved_by_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["rejected_by_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_refresh_intents_entity_type"), "refresh_intents", ["entity_type"], unique=False
    )
    op.create_index(
        op.f("ix_refresh_intents_entity_id"), "refresh_intents", ["entity_id"], unique=False
    )
    op.create_index(
        op.f("ix_refresh_intents_intent_status"), "refresh_intents", ["intent_status"], unique=False
    )
    op.create_index(
        op.f("ix_refresh_intents_planned_date"), "refresh_intents", ["planned_date"], unique=False
    )

    op.create_table(
        "refresh_history",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("refresh_intent_id", sa.String(length=36), nullable=True),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.String(length=36), nullable=False),
        sa.Column("entity_name", sa.String(length=255), nullable=True),
        sa.Column("refresh_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("refresh_type", sa.String(length=50), nullable=False),
        sa.Column("source_environment_name", sa.String(length=255), nullable=True),
        sa.Column("requested_by_user_id", sa.String(length=36), nullable=True),
        sa.Column("executed_by_user_id", sa.String(length=36), nullable=True),
        sa.Column(
            "execution_status", sa.String(length=50), nullable=False, server_default="SUCCESS"
        ),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("data_volume_gb", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("rows_affected", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["refresh_intent_id"], ["refresh_intents.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_refresh_history_refresh_intent_id"),
        "refresh_history",
        ["refresh_intent_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_refresh_history_entity_type"), "refresh_history", ["entity_type"], unique=False
    )
    op.create_index(
        op.f("ix_refresh_history_entity_id"), "refresh_history", ["entity_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_refresh_history_entity_id"), table_name="refresh_history")
    op.drop_index(op.f("ix_refresh_history_entity_type"), table_name="refresh_history")
    op.drop_index(op.f("ix_refresh_history_refresh_intent_id"), table_name="refresh_history")
    op.drop_table("refresh_history")
    op.drop_index(op.f("ix_refresh_intents_planned_date"), table_name="refresh_intents")
    op.drop_index(op.f("ix_refresh_intents_intent_status"), table_name="refresh_intents")
    op.drop_index(op.f("ix_refresh_intents_entity_id"), table_name="refresh_intents")
    op.drop_index(op.f("ix_refresh_intents_entity_type"), table_name="refresh_intents")
    op.drop_table("refresh_intents")
