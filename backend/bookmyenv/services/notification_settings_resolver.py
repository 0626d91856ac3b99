"""Collects the notification settings that apply to a refresh intent."""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.orm import Session

from bookmyenv.models.refresh_notification import (
    ALL_NOTIFICATION_EVENTS,
    RefreshNotificationSetting,
    ScopeType,
)
from bookmyenv.repositories.notification_setting_repository import NotificationSettingRepository

logger = logging.getLogger(__name__)


def default_in_app_setting() -> RefreshNotificationSetting:
    """Transient in-app-only setting used when nothing is configured."""
    return RefreshNotificationSetting(
        scope_type=ScopeType.GLOBAL.value,
        email_enabled=False,
        in_app_enabled=True,
        subscribed_events=list(ALL_NOTIFICATION_EVENTS),
    )


class NotificationSettingsResolver:
    """Gathers entity, group and global settings for an intent.

    Scopes are unioned rather than overridden: a recipient reachable through
    two matching settings is dispatched to twice.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationSettingRepository(db)

    def resolve(
        self,
        entity_type: str,
        entity_id: UUID,
        notification_group_ids: Iterable[UUID | str] | None = None,
    ) -> list[RefreshNotificationSetting]:
        """Return entity, then group, then global settings.

        Falls back to a single in-app setting subscribed to every event when
        no scope matches. Returns an empty list if the lookup fails.
        """
        try:
            settings: list[RefreshNotificationSetting] = []
            settings.extend(self.repo.get_for_entity(entity_type, entity_id))
            settings.extend(self.repo.get_for_groups(notification_group_ids or []))
            settings.extend(self.repo.get_global())
        except Exception:
            logger.exception(
                "Failed to load notification settings for %s %s", entity_type, entity_id
            )
            self.db.rollback()
            return []

        if not settings:
            return [default_in_app_setting()]
        return settings
