"""Notification settings and dispatch log for refresh lifecycle events."""

from enum import Enum

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, String, Text, func

from bookmyenv.core.database import Base
from bookmyenv.models.shared import UUIDType, generate_uuid


class NotificationEvent(str, Enum):
    REFRESH_REQUESTED = "REFRESH_REQUESTED"
    REFRESH_APPROVED = "REFRESH_APPROVED"
    REFRESH_REJECTED = "REFRESH_REJECTED"
    REFRESH_SCHEDULED = "REFRESH_SCHEDULED"
    REFRESH_REMINDER_7DAY = "REFRESH_REMINDER_7DAY"
    REFRESH_REMINDER_1DAY = "REFRESH_REMINDER_1DAY"
    REFRESH_REMINDER_1HR = "REFRESH_REMINDER_1HR"
    REFRESH_STARTING = "REFRESH_STARTING"
    REFRESH_COMPLETED = "REFRESH_COMPLETED"
    REFRESH_FAILED = "REFRESH_FAILED"
    CONFLICT_DETECTED = "CONFLICT_DETECTED"
    CONFLICT_RESOLVED = "CONFLICT_RESOLVED"


ALL_NOTIFICATION_EVENTS = [event.value for event in NotificationEvent]

# Events the requester always hears about, whatever the channel settings say
REQUESTER_EVENTS = frozenset(
    {
        NotificationEvent.REFRESH_APPROVED.value,
        NotificationEvent.REFRESH_REJECTED.value,
        NotificationEvent.REFRESH_COMPLETED.value,
        NotificationEvent.REFRESH_FAILED.value,
    }
)


class NotificationChannel(str, Enum):
    EMAIL = "EMAIL"
    TEAMS = "TEAMS"
    SLACK = "SLACK"
    IN_APP = "IN_APP"
    WEBHOOK = "WEBHOOK"


class ScopeType(str, Enum):
    ENTITY = "Entity"
    GROUP = "Group"
    GLOBAL = "Global"


class RecipientType(str, Enum):
    USER = "User"
    WEBHOOK = "Webhook"
    GROUP = "Group"


class DeliveryStatus(str, Enum):
    SENT = "SENT"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


class RefreshNotificationSetting(Base):
    """Channel configuration scoped to one entity, one group, or everything."""

    __tablename__ = "refresh_notification_settings"
    __table_args__ = (
        Index("ix_refresh_notification_settings_entity", "entity_type", "entity_id"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    scope_type = Column(String(20), nullable=False, index=True)
    entity_type = Column(String(50), nullable=True)
    entity_id = Column(UUIDType, nullable=True)
    group_id = Column(
        UUIDType,
        ForeignKey("user_groups.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    email_enabled = Column(Boolean, nullable=False, default=False)
    teams_webhook_url = Column(String(2048), nullable=True)
    slack_webhook_url = Column(String(2048), nullable=True)
    in_app_enabled = Column(Boolean, nullable=False, default=False)
    custom_webhook_url = Column(String(2048), nullable=True)
    subscribed_events = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class RefreshNotificationLog(Base):
    """Append-only audit row for one dispatch attempt."""

    __tablename__ = "refresh_notification_log"
    __table_args__ = (
        Index("ix_refresh_notification_log_intent", "refresh_intent_id"),
        Index("ix_refresh_notification_log_status", "status"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    refresh_intent_id = Column(
        UUIDType,
        ForeignKey("refresh_intents.id", ondelete="CASCADE"),
        nullable=False,
    )
    event_type = Column(String(50), nullable=False)
    channel = Column(String(20), nullable=False)
    recipient_type = Column(String(20), nullable=False)
    recipient_id = Column(UUIDType, nullable=True)
    recipient_email = Column(String(255), nullable=True)
    recipient_webhook_url = Column(String(2048), nullable=True)
    status = Column(String(20), nullable=False)
    subject = Column(String(500), nullable=True)
    message_body = Column(Text, nullable=True)
    error_message = Column(Text, nullable=True)
    sent_at = Column(DateTime(timezone=True), server_default=func.now())
