from bookmyenv.models.notification import Notification
from bookmyenv.models.refresh_history import ExecutionStatus, RefreshHistory
from bookmyenv.models.refresh_intent import EntityType, IntentStatus, RefreshIntent, RefreshType
from bookmyenv.models.refresh_notification import (
    ALL_NOTIFICATION_EVENTS,
    REQUESTER_EVENTS,
    DeliveryStatus,
    NotificationChannel,
    NotificationEvent,
    RecipientType,
    RefreshNotificationLog,
    RefreshNotificationSetting,
    ScopeType,
)
from bookmyenv.models.user import User, UserGroup, UserGroupMember, UserRole

__all__ = [
    "ALL_NOTIFICATION_EVENTS",
    "DeliveryStatus",
    "EntityType",
    "ExecutionStatus",
    "IntentStatus",
    "Notification",
    "NotificationChannel",
    "NotificationEvent",
    "RecipientType",
    "RefreshHistory",
    "RefreshIntent",
    "RefreshNotificationLog",
    "RefreshNotificationSetting",
    "RefreshType",
    "REQUESTER_EVENTS",
    "ScopeType",
    "User",
    "UserGroup",
    "UserGroupMember",
    "UserRole",
]
