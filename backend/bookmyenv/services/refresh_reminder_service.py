"""Periodic scan that sends 7-day, 1-day and 1-hour refresh reminders."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from bookmyenv.models.refresh_intent import IntentStatus, RefreshIntent
from bookmyenv.models.refresh_notification import NotificationEvent
from bookmyenv.models.shared import ensure_utc
from bookmyenv.repositories.refresh_intent_repository import RefreshIntentRepository
from bookmyenv.services.refresh_notification_service import RefreshNotificationService

logger = logging.getLogger(__name__)

REMINDER_STATUSES = (IntentStatus.APPROVED.value, IntentStatus.SCHEDULED.value)


@dataclass(frozen=True)
class ReminderWindow:
    """A band of planned dates, relative to the scan time, that gets a reminder.

    Bands are wider than the scan interval so a slow scanner still catches
    every intent. The mark token keeps repeat scans inside the band quiet:
    day-keyed windows send once per calendar day, instant-keyed ones once
    per scan instant.
    """

    name: str
    event: NotificationEvent
    starts_after: timedelta
    ends_after: timedelta
    keyed_by_instant: bool = False

    def bounds(self, now: datetime) -> tuple[datetime, datetime]:
        return now + self.starts_after, now + self.ends_after

    def mark(self, now: datetime) -> str:
        if self.keyed_by_instant:
            return f"{self.name}-{now.isoformat()}"
        return f"{self.name}-{now.date().isoformat()}"


REMINDER_WINDOWS: tuple[ReminderWindow, ...] = (
    ReminderWindow(
        name="7day",
        event=NotificationEvent.REFRESH_REMINDER_7DAY,
        starts_after=timedelta(days=6, hours=23),
        ends_after=timedelta(days=7, hours=1),
    ),
    ReminderWindow(
        name="1day",
        event=NotificationEvent.REFRESH_REMINDER_1DAY,
        starts_after=timedelta(hours=23),
        ends_after=timedelta(hours=25),
    ),
    ReminderWindow(
        name="1hr",
        event=NotificationEvent.REFRESH_REMINDER_1HR,
        starts_after=timedelta(minutes=55),
        ends_after=timedelta(minutes=65),
        keyed_by_instant=True,
    ),
)


class RefreshReminderService:
    """Finds intents entering a reminder window and notifies about them once."""

    def __init__(self, db: Session):
        self.db = db
        self.intent_repo = RefreshIntentRepository(db)
        self.notification_service = RefreshNotificationService(db)

    def due_intents(self, window: ReminderWindow, now: datetime) -> list[RefreshIntent]:
        """Approved or scheduled intents inside ``window`` not yet marked for it."""
        mark = window.mark(now)
        start, end = window.bounds(now)
        candidates = self.intent_repo.get_planned_between(start, end, REMINDER_STATUSES)
        return [
            intent
            for intent in candidates
            if mark not in (intent.notification_sent_dates or [])
        ]

    def process_scheduled_reminders(self, now: datetime | None = None) -> dict[str, int]:
        """Run one scan over every reminder window.

        Each intent's mark is claimed atomically before its reminder is sent,
        so overlapping scans cannot both send it.

        Args:
            now: Scan instant; defaults to the current UTC time.

        Returns:
            Number of reminders sent, keyed by window name.
        """
        now = ensure_utc(now) if now is not None else datetime.now(UTC)
        counts: dict[str, int] = {}

        for window in REMINDER_WINDOWS:
            try:
                counts[window.name] = self._process_window(window, now)
            except Exception:
                logger.exception("Failed to process %s refresh reminders", window.name)
                self.db.rollback()
                counts[window.name] = 0

        logger.info(
            "[Reminders] Processed: %d 7-day, %d 1-day, %d 1-hour",
            counts["7day"],
            counts["1day"],
            counts["1hr"],
        )
        return counts

    def _process_window(self, window: ReminderWindow, now: datetime) -> int:
        mark = window.mark(now)
        sent = 0
        for intent in self.due_intents(window, now):
            intent_id = intent.id
            if not self.intent_repo.claim_reminder_mark(intent, mark):
                logger.info("Reminder %s for intent %s already claimed", mark, intent_id)
                continue
            self.notification_service.send_notifications(intent_id, window.event)  # type: ignore[arg-type]
            sent += 1
        return sent
