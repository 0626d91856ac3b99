from bookmyenv.schemas.notification import NotificationCountResponse, NotificationResponse
from bookmyenv.schemas.notification_log import NotificationLogResponse
from bookmyenv.schemas.notification_setting import (
    NotificationSettingCreate,
    NotificationSettingResponse,
    NotificationSettingUpdate,
)
from bookmyenv.schemas.refresh_history import RefreshHistoryResponse
from bookmyenv.schemas.refresh_intent import (
    ApproveIntentRequest,
    CancelIntentRequest,
    CompleteIntentRequest,
    RefreshIntentCreate,
    RefreshIntentResponse,
    RefreshIntentUpdate,
    RejectIntentRequest,
    ScheduleIntentRequest,
)
from bookmyenv.schemas.refresh_overview import (
    RefreshCalendarResponse,
    RefreshStatisticsResponse,
)

__all__ = [
    "ApproveIntentRequest",
    "CancelIntentRequest",
    "CompleteIntentRequest",
    "NotificationCountResponse",
    "NotificationLogResponse",
    "NotificationResponse",
    "NotificationSettingCreate",
    "NotificationSettingResponse",
    "NotificationSettingUpdate",
    "RefreshCalendarResponse",
    "RefreshHistoryResponse",
    "RefreshIntentCreate",
    "RefreshIntentResponse",
    "RefreshIntentUpdate",
    "RefreshStatisticsResponse",
    "RejectIntentRequest",
    "ScheduleIntentRequest",
]
