import logging
from typing import Any
from uuid import UUID

from arq import cron

from bookmyenv.core.database import SessionLocal
from bookmyenv.services.refresh_notification_service import RefreshNotificationService
from bookmyenv.services.refresh_reminder_service import RefreshReminderService
from bookmyenv.tasks import redis_settings

logger = logging.getLogger(__name__)


async def process_scheduled_reminders_task(ctx: dict[str, Any]) -> dict[str, int]:
    """Background task: send 7-day, 1-day and 1-hour refresh reminders.

    Runs every 5 minutes. Each reminder is marked on its intent before it is
    sent, so overlapping runs never repeat one.
    """
    db = SessionLocal()
    try:
        service = RefreshReminderService(db)
        counts = service.process_scheduled_reminders()
        total = sum(counts.values())
        if total > 0:
            logger.info("Sent %d refresh reminders", total)
        return counts
    finally:
        db.close()


async def send_refresh_notifications_task(
    ctx: dict[str, Any],
    intent_id: str,
    event_type: str,
    extra: dict[str, Any] | None = None,
) -> None:
    """Background task: fan one refresh intent event out to its channels.

    Args:
        ctx: ARQ worker context.
        intent_id: UUID string of the refresh intent.
        event_type: The notification event, e.g. ``REFRESH_APPROVED``.
        extra: Template values that accompany the event.
    """
    db = SessionLocal()
    try:
        service = RefreshNotificationService(db)
        service.send_notifications(UUID(intent_id), event_type, extra)
    finally:
        db.close()


class WorkerSettings:
    functions = [
        process_scheduled_reminders_task,
        send_refresh_notifications_task,
    ]
    cron_jobs = [
        cron(
            process_scheduled_reminders_task,
            minute={0, 5, 10, 15, 20, 25, 30, 35, 40, 45, 50, 55},
        ),
    ]
    redis_settings = redis_settings
