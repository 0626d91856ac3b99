"""create refresh notification settings, log and inbox tables

Revision ID: b4e5f6a7c8d9
Revises: 7c8d9e0f1a2b
Create Date: 2026-10-19 09:20:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "b4e5f6a7c8d9"
down_revision = "7c8d9e0f1a2b"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "refresh_notification_settings",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("scope_type", sa.String(length=20), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=True),
        sa.Column("entity_id", sa.String(length=36), nullable=True),
        sa.Column("group_id", sa.String(length=36), nullable=True),
        sa.Column("email_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("teams_webhook_url", sa.String(length=2048), nullable=True),
        sa.Column("slack_webhook_url", sa.String(length=2048), nullable=True),
        sa.Column("in_app_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("custom_webhook_url", sa.String(length=2048), nullable=True),
        sa.Column("subscribed_events", sa.JSON(), nullable=False),
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
        sa.ForeignKeyConstraint(["group_id"], ["user_groups.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_refresh_notification_settings_scope_type"),
        "refresh_notification_settings",
        ["scope_type"],
        unique=False,
    )
    op.create_index(
        op.f("ix_refresh_notification_settings_group_id"),
        "refresh_notification_settings",
        ["group_id"],
        unique=False,
    )
    op.create_index(
        "ix_refresh_notification_settings_entity",
        "refresh_notification_settings",
        ["entity_type", "entity_id"],
        unique=False,
    )

    op.create_table(
        "refresh_notification_log",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("refresh_intent_id", sa.String(length=36), nullable=False),
        sa.Column("event_type", sa.String(length=50), nullable=False),
        sa.Column("channel", sa.String(length=20), nullable=False),
        sa.Column("recipient_type", sa.String(length=20), nullable=False),
        sa.Column("recipient_id", sa.String(length=36), nullable=True),
        sa.Column("recipient_email", sa.String(length=255), nullable=True),
        sa.Column("recipient_webhook_url", sa.String(length=2048), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("subject", sa.String(length=500), nullable=True),
        sa.Column("message_body", sa.Text(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column(
            "sent_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["refresh_intent_id"], ["refresh_intents.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_refresh_notification_log_intent",
        "refresh_notification_log",
        ["refresh_intent_id"],
        unique=False,
    )
    op.create_index(
        "ix_refresh_notification_log_status",
        "refresh_notification_log",
        ["status"],
        unique=False,
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("related_entity_type", sa.String(length=50), nullable=True),
        sa.Column("related_entity_id", sa.String(length=36), nullable=True),
        sa.Column("action_url", sa.String(length=2048), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_notifications_user_id"), "notifications", ["user_id"], unique=False)
    op.create_index(op.f("ix_notifications_type"), "notifications", ["type"], unique=False)
    op.create_index(op.f("ix_notifications_is_read"), "notifications", ["is_read"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_notifications_is_read"), table_name="notifications")
    op.drop_index(op.f("ix_notifications_type"), table_name="notifications")
    op.drop_index(op.f("ix_notifications_user_id"), table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_refresh_notification_log_status", table_name="refresh_notification_log")
    op.drop_index("ix_refresh_notification_log_intent", table_name="refresh_notification_log")
    op.drop_table("refresh_notification_log")
    op.drop_index(
        "ix_refresh_notification_settings_entity", table_name="refresh_notification_settings"
    )
    op.drop_index(
        op.f("ix_refresh_notification_settings_group_id"),
        table_name="refresh_notification_settings",
    )
    op.drop_index(
        op.f("ix_refresh_notification_settings_scope_type"),
        table_name="refresh_notification_settings",
    )
    op.drop_table("refresh_notification_settings")
