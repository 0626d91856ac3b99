"""Per-channel dispatchers for refresh notifications.

Every dispatcher is best-effort: a failure is logged, recorded as a
``FAILED`` log row and swallowed so the remaining channels still run.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import httpx
from sqlalchemy.orm import Session

from bookmyenv.core.config import settings
from bookmyenv.models.notification import Notification
from bookmyenv.models.refresh_intent import RefreshIntent
from bookmyenv.models.refresh_notification import (
    REQUESTER_EVENTS,
    DeliveryStatus,
    NotificationChannel,
    RecipientType,
    RefreshNotificationSetting,
)
from bookmyenv.repositories.notification_log_repository import NotificationLogRepository
from bookmyenv.repositories.notification_repository import NotificationRepository
from bookmyenv.repositories.user_repository import UserGroupRepository
from bookmyenv.services.notification_content import (
    NotificationContent,
    entity_label,
    format_planned_date,
)

logger = logging.getLogger(__name__)

IN_APP_NOTIFICATION_TYPE = "REFRESH"


def intent_action_url(intent_id: UUID) -> str:
    return f"/refresh/intents/{intent_id}"


def create_refresh_notification(
    repo: NotificationRepository,
    user_id: UUID,
    intent: RefreshIntent,
    content: NotificationContent,
    commit: bool = True,
) -> Notification:
    """Add an in-app inbox entry pointing at the intent."""
    return repo.create(
        user_id=user_id,
        type=IN_APP_NOTIFICATION_TYPE,
        title=content.subject,
        message=content.body,
        related_entity_type=str(intent.entity_type),
        related_entity_id=intent.entity_id,  # type: ignore[arg-type]
        action_url=intent_action_url(intent.id),  # type: ignore[arg-type]
        commit=commit,
    )


class WebhookDeliveryError(Exception):
    """An outbound POST failed; ``payload`` is the JSON body that was sent."""

    def __init__(self, message: str, payload: str):
        super().__init__(message)
        self.payload = payload


class ChannelDispatcher:
    """Base class: subclasses implement ``is_enabled`` and ``_send``."""

    channel: NotificationChannel
    recipient_type: RecipientType

    def __init__(self, db: Session):
        self.db = db
        self.log_repo = NotificationLogRepository(db)

    def is_enabled(self, setting: RefreshNotificationSetting) -> bool:
        raise NotImplementedError

    def destination(self, setting: RefreshNotificationSetting) -> str | None:
        return None

    def send(
        self,
        intent: RefreshIntent,
        event_type: str,
        content: NotificationContent,
        setting: RefreshNotificationSetting,
    ) -> None:
        intent_id = intent.id
        try:
            self._send(intent, event_type, content, setting)
        except Exception as exc:
            logger.exception(
                "%s notification for intent %s (%s) failed",
                self.channel.value,
                intent_id,
                event_type,
            )
            self.db.rollback()
            self._record_failure(intent_id, event_type, content, setting, exc)  # type: ignore[arg-type]

    def _send(
        self,
        intent: RefreshIntent,
        event_type: str,
        content: NotificationContent,
        setting: RefreshNotificationSetting,
    ) -> None:
        raise NotImplementedError

    def _record_failure(
        self,
        intent_id: UUID,
        event_type: str,
        content: NotificationContent,
        setting: RefreshNotificationSetting,
        exc: Exception,
    ) -> None:
        try:
            self.log_repo.create(
                refresh_intent_id=intent_id,
                event_type=event_type,
                channel=self.channel.value,
                recipient_type=self.recipient_type.value,
                recipient_webhook_url=self.destination(setting),
                status=DeliveryStatus.FAILED.value,
                subject=content.subject,
                message_body=exc.payload if isinstance(exc, WebhookDeliveryError) else None,
                error_message=str(exc)[:1000] or exc.__class__.__name__,
            )
        except Exception:
            logger.exception(
                "Could not record failed %s notification for intent %s",
                self.channel.value,
                intent_id,
            )
            self.db.rollback()


class EmailDispatcher(ChannelDispatcher):
    """Logs one send per active member of the setting's group.

    SMTP transport is not wired in; the log row is the record of intent.
    """

    channel = NotificationChannel.EMAIL
    recipient_type = RecipientType.USER

    def __init__(self, db: Session):
        super().__init__(db)
        self.group_repo = UserGroupRepository(db)

    def is_enabled(self, setting: RefreshNotificationSetting) -> bool:
        return bool(setting.email_enabled)

    def _send(
        self,
        intent: RefreshIntent,
        event_type: str,
        content: NotificationContent,
        setting: RefreshNotificationSetting,
    ) -> None:
        if setting.group_id is None:
            return

        for recipient in self.group_repo.get_active_members(setting.group_id):  # type: ignore[arg-type]
            self.log_repo.create(
                refresh_intent_id=intent.id,  # type: ignore[arg-type]
                event_type=event_type,
                channel=self.channel.value,
                recipient_type=self.recipient_type.value,
                recipient_id=recipient.id,  # type: ignore[arg-type]
                recipient_email=recipient.email,  # type: ignore[arg-type]
                status=DeliveryStatus.SENT.value,
                subject=content.subject,
                message_body=content.body,
            )
            logger.info("[Email] Sent to %s: %s", recipient.email, content.subject)


class _HttpChannelDispatcher(ChannelDispatcher):
    """Dispatcher that posts a JSON payload to a URL held on the setting."""

    recipient_type = RecipientType.WEBHOOK
    url_field: str

    def destination(self, setting: RefreshNotificationSetting) -> str | None:
        return getattr(setting, self.url_field)

    def is_enabled(self, setting: RefreshNotificationSetting) -> bool:
        return bool(self.destination(setting))

    def build_payload(
        self,
        intent: RefreshIntent,
        event_type: str,
        content: NotificationContent,
    ) -> dict[str, Any]:
        raise NotImplementedError

    def _send(
        self,
        intent: RefreshIntent,
        event_type: str,
        content: NotificationContent,
        setting: RefreshNotificationSetting,
    ) -> None:
        url = str(self.destination(setting))
        payload = self.build_payload(intent, event_type, content)
        body = json.dumps(payload, default=str)

        if settings.NOTIFICATION_WEBHOOK_DELIVERY_ENABLED:
            try:
                with httpx.Client(timeout=settings.NOTIFICATION_WEBHOOK_TIMEOUT) as client:
                    resp = client.post(
                        url,
                        content=body.encode("utf-8"),
                        headers={"Content-Type": "application/json"},
                    )
                resp.raise_for_status()
            except httpx.HTTPError as exc:
                raise WebhookDeliveryError(str(exc) or exc.__class__.__name__, body) from exc

        self.log_repo.create(
            refresh_intent_id=intent.id,  # type: ignore[arg-type]
            event_type=event_type,
            channel=self.channel.value,
            recipient_type=self.recipient_type.value,
            recipient_webhook_url=url,
            status=DeliveryStatus.SENT.value,
            subject=content.subject,
            message_body=body,
        )
        logger.info("[%s] Webhook sent to %s: %s", self.channel.value, url, content.subject)


class TeamsDispatcher(_HttpChannelDispatcher):
    channel = NotificationChannel.TEAMS
    url_field = "teams_webhook_url"

    @staticmethod
    def theme_color(event_type: str) -> str:
        if "FAILED" in event_type:
            return "FF0000"
        if "COMPLETED" in event_type:
            return "00FF00"
        return "0076D7"

    def build_payload(
        self,
        intent: RefreshIntent,
        event_type: str,
        content: NotificationContent,
    ) -> dict[str, Any]:
        return {
            "@type": "MessageCard",
            "@context": "http://schema.org/extensions",
            "themeColor": self.theme_color(event_type),
            "summary": content.subject,
            "sections": [
                {
                    "activityTitle": content.subject,
                    "facts": [
                        {"name": "Entity", "value": entity_label(intent)},
                        {"name": "Type", "value": intent.refresh_type},
                        {"name": "Status", "value": intent.intent_status},
                        {"name": "Planned Date", "value": format_planned_date(intent.planned_date)},  # type: ignore[arg-type]
                    ],
                    "markdown": True,
                }
            ],
        }


class SlackDispatcher(_HttpChannelDispatcher):
    channel = NotificationChannel.SLACK
    url_field = "slack_webhook_url"

    @staticmethod
    def attachment_color(event_type: str) -> str:
        if "FAILED" in event_type:
            return "danger"
        if "COMPLETED" in event_type:
            return "good"
        return "#0076D7"

    def build_payload(
        self,
        intent: RefreshIntent,
        event_type: str,
        content: NotificationContent,
    ) -> dict[str, Any]:
        summary = content.body.split("\n\n")[0]
        return {
            "text": content.subject,
            "blocks": [
                {
                    "type": "header",
                    "text": {"type": "plain_text", "text": content.subject},
                },
                {
                    "type": "section",
                    "fields": [
                        {"type": "mrkdwn", "text": f"*Entity:*\n{entity_label(intent)}"},
                        {"type": "mrkdwn", "text": f"*Type:*\n{intent.refresh_type}"},
                        {"type": "mrkdwn", "text": f"*Status:*\n{intent.intent_status}"},
                        {
                            "type": "mrkdwn",
                            "text": f"*Planned:*\n{format_planned_date(intent.planned_date)}",  # type: ignore[arg-type]
                        },
                    ],
                },
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": summary},
                },
            ],
            "attachments": [
                {"color": self.attachment_color(event_type), "fallback": content.subject}
            ],
        }


class WebhookDispatcher(_HttpChannelDispatcher):
    channel = NotificationChannel.WEBHOOK
    url_field = "custom_webhook_url"

    def build_payload(
        self,
        intent: RefreshIntent,
        event_type: str,
        content: NotificationContent,
    ) -> dict[str, Any]:
        return {
            "event": event_type,
            "timestamp": datetime.now(UTC).isoformat(),
            "intent": {
                "id": str(intent.id),
                "entity_type": intent.entity_type,
                "entity_id": str(intent.entity_id),
                "entity_name": intent.entity_name,
                "refresh_type": intent.refresh_type,
                "status": intent.intent_status,
                "planned_date": intent.planned_date.isoformat() if intent.planned_date else None,
                "source": intent.source_environment_name,
            },
            "notification": {
                "subject": content.subject,
                "body": content.body,
            },
        }


class InAppDispatcher(ChannelDispatcher):
    """Creates inbox entries, then one aggregate ``DELIVERED`` log row.

    Recipients are all members of the setting's group. A setting without a
    group reaches the requester instead, except for the events the requester
    is already told about directly.
    """

    channel = NotificationChannel.IN_APP
    recipient_type = RecipientType.GROUP

    def __init__(self, db: Session):
        super().__init__(db)
        self.group_repo = UserGroupRepository(db)
        self.notification_repo = NotificationRepository(db)

    def is_enabled(self, setting: RefreshNotificationSetting) -> bool:
        return bool(setting.in_app_enabled)

    def recipients(
        self,
        intent: RefreshIntent,
        event_type: str,
        setting: RefreshNotificationSetting,
    ) -> list[UUID]:
        if setting.group_id is not None:
            return self.group_repo.get_member_ids(setting.group_id)  # type: ignore[arg-type]
        if intent.requested_by_user_id is not None and event_type not in REQUESTER_EVENTS:
            return [intent.requested_by_user_id]  # type: ignore[list-item]
        return []

    def _send(
        self,
        intent: RefreshIntent,
        event_type: str,
        content: NotificationContent,
        setting: RefreshNotificationSetting,
    ) -> None:
        user_ids = self.recipients(intent, event_type, setting)
        for user_id in user_ids:
            create_refresh_notification(
                self.notification_repo, user_id, intent, content, commit=False
            )

        self.log_repo.create(
            refresh_intent_id=intent.id,  # type: ignore[arg-type]
            event_type=event_type,
            channel=self.channel.value,
            recipient_type=self.recipient_type.value,
            recipient_id=setting.group_id,  # type: ignore[arg-type]
            status=DeliveryStatus.DELIVERED.value,
            subject=content.subject,
            message_body=content.body,
        )
        logger.info("[In-App] Notifications sent to %d users: %s", len(user_ids), content.subject)


DISPATCHER_CLASSES: tuple[type[ChannelDispatcher], ...] = (
    EmailDispatcher,
    TeamsDispatcher,
    SlackDispatcher,
    InAppDispatcher,
    WebhookDispatcher,
)
