"""Fans refresh lifecycle events out to the configured notification channels."""

import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from bookmyenv.models.refresh_intent import RefreshIntent
from bookmyenv.models.refresh_notification import REQUESTER_EVENTS, NotificationEvent
from bookmyenv.repositories.notification_repository import NotificationRepository
from bookmyenv.repositories.refresh_intent_repository import RefreshIntentRepository
from bookmyenv.services.notification_channels import (
    DISPATCHER_CLASSES,
    ChannelDispatcher,
    create_refresh_notification,
)
from bookmyenv.services.notification_content import (
    NotificationContent,
    build_notification_content,
    event_key,
)
from bookmyenv.services.notification_settings_resolver import NotificationSettingsResolver

logger = logging.getLogger(__name__)


class RefreshNotificationService:
    """Sends notifications for one refresh intent event.

    Delivery is best-effort. Nothing raised while notifying reaches the
    caller, so the business action that triggered the event always succeeds.
    """

    def __init__(self, db: Session):
        self.db = db
        self.intent_repo = RefreshIntentRepository(db)
        self.notification_repo = NotificationRepository(db)
        self.resolver = NotificationSettingsResolver(db)
        self.dispatchers: list[ChannelDispatcher] = [cls(db) for cls in DISPATCHER_CLASSES]

    def send_notifications(
        self,
        intent_id: UUID,
        event_type: NotificationEvent | str,
        extra: Mapping[str, Any] | None = None,
    ) -> None:
        """Dispatch ``event_type`` for the intent on every subscribed channel.

        Args:
            intent_id: The refresh intent the event is about.
            event_type: One of NotificationEvent, or any other event string.
            extra: Event specific values used by the templates, such as
                ``approval_notes`` or ``error_message``.
        """
        event = event_key(event_type)
        try:
            intent = self.intent_repo.get_by_id(intent_id)
            if intent is None:
                logger.warning("Notification skipped: refresh intent %s not found", intent_id)
                return

            settings = self.resolver.resolve(
                str(intent.entity_type),
                intent.entity_id,  # type: ignore[arg-type]
                intent.notification_groups,  # type: ignore[arg-type]
            )
            content = build_notification_content(intent, event, extra)

            for setting in settings:
                if event not in (setting.subscribed_events or []):
                    continue
                for dispatcher in self.dispatchers:
                    if dispatcher.is_enabled(setting):
                        dispatcher.send(intent, event, content, setting)

            if event in REQUESTER_EVENTS:
                self.notify_requester(intent, content)
        except Exception:
            logger.exception("Failed to send %s notifications for intent %s", event, intent_id)
            self.db.rollback()

    def notify_requester(self, intent: RefreshIntent, content: NotificationContent) -> None:
        """Put the event straight into the requester's inbox."""
        intent_id = intent.id
        requester = intent.requested_by
        if requester is None or not requester.email:
            return
        try:
            create_refresh_notification(
                self.notification_repo,
                requester.id,  # type: ignore[arg-type]
                intent,
                content,
            )
            logger.info("[Requester] Notified %s: %s", requester.username, content.subject)
        except Exception:
            logger.exception("Failed to notify requester of intent %s", intent_id)
            self.db.rollback()
