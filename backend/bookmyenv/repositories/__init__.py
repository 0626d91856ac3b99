from bookmyenv.repositories.notification_log_repository import NotificationLogRepository
from bookmyenv.repositories.notification_repository import NotificationRepository
from bookmyenv.repositories.notification_setting_repository import NotificationSettingRepository
from bookmyenv.repositories.refresh_history_repository import RefreshHistoryRepository
from bookmyenv.repositories.refresh_intent_repository import RefreshIntentRepository
from bookmyenv.repositories.refresh_overview_repository import RefreshOverviewRepository
from bookmyenv.repositories.user_repository import UserGroupRepository, UserRepository

__all__ = [
    "NotificationLogRepository",
    "NotificationRepository",
    "NotificationSettingRepository",
    "RefreshHistoryRepository",
    "RefreshIntentRepository",
    "RefreshOverviewRepository",
    "UserGroupRepository",
    "UserRepository",
]
