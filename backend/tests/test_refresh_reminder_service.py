"""Tests for the refresh reminder scanner."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from bookmyenv.core import database as db_module
from bookmyenv.core.database import get_db
from bookmyenv.models.refresh_intent import IntentStatus, RefreshIntent
from bookmyenv.repositories.refresh_intent_repository import RefreshIntentRepository
from bookmyenv.services.refresh_reminder_service import (
    REMINDER_WINDOWS,
    RefreshReminderService,
)
from tests.conftest import create_intent, create_user

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def db_session():
    """Create a database session for testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def service(db_session):
    return RefreshReminderService(db_session)


@pytest.fixture
def requester(db_session):
    return create_user(db_session, "alice")


def _reload(db_session, intent_id):
    db_session.expire_all()
    return db_session.query(RefreshIntent).filter(RefreshIntent.id == intent_id).one()


class TestReminderWindow:
    def test_windows(self):
        by_name = {w.name: w for w in REMINDER_WINDOWS}
        assert by_name["7day"].bounds(NOW) == (
            NOW + timedelta(days=6, hours=23),
            NOW + timedelta(days=7, hours=1),
        )
        assert by_name["1day"].bounds(NOW) == (NOW + timedelta(hours=23), NOW + timedelta(hours=25))
        assert by_name["1hr"].bounds(NOW) == (
            NOW + timedelta(minutes=55),
            NOW + timedelta(minutes=65),
        )

    def test_marks(self):
        by_name = {w.name: w for w in REMINDER_WINDOWS}
        assert by_name["7day"].mark(NOW) == "7day-2026-10-19"
        assert by_name["1day"].mark(NOW) == "1day-2026-10-19"
        assert by_name["1hr"].mark(NOW) == "1hr-2026-10-19T12:00:00+00:00"


class TestProcessScheduledReminders:
    def test_seven_day_reminder_sent_once_per_day(self, db_session, service, requester):
        intent = create_intent(
            db_session, requester, IntentStatus.SCHEDULED, planned_date=NOW + timedelta(days=7)
        )

        with patch.object(service.notification_service, "send_notifications") as send:
            counts = service.process_scheduled_reminders(NOW)

        assert counts == {"7day": 1, "1day": 0, "1hr": 0}
        send.assert_called_once_with(intent.id, REMINDER_WINDOWS[0].event)
        assert _reload(db_session, intent.id).notification_sent_dates == ["7day-2026-10-19"]

        with patch.object(service.notification_service, "send_notifications") as send:
            counts = service.process_scheduled_reminders(NOW + timedelta(minutes=5))

        assert counts == {"7day": 0, "1day": 0, "1hr": 0}
        send.assert_not_called()

    def test_eight_days_out_selected_by_no_window(self, db_session, service, requester):
        create_intent(
            db_session, requester, IntentStatus.SCHEDULED, planned_date=NOW + timedelta(days=8)
        )

        with patch.object(service.notification_service, "send_notifications") as send:
            counts = service.process_scheduled_reminders(NOW)

        assert counts == {"7day": 0, "1day": 0, "1hr": 0}
        send.assert_not_called()

    def test_only_approved_or_scheduled(self, db_session, service, requester):
        for status in (IntentStatus.REQUESTED, IntentStatus.CANCELLED, IntentStatus.IN_PROGRESS):
            create_intent(db_session, requester, status, planned_date=NOW + timedelta(days=1))
        approved = create_intent(
            db_session, requester, IntentStatus.APPROVED, planned_date=NOW + timedelta(days=1)
        )

        with patch.object(service.notification_service, "send_notifications") as send:
            counts = service.process_scheduled_reminders(NOW)

        assert counts["1day"] == 1
        send.assert_called_once_with(approved.id, REMINDER_WINDOWS[1].event)

    def test_one_hour_reminder_sends_real_notification(self, db_session, service, requester):
        intent = create_intent(
            db_session,
            requester,
            IntentStatus.SCHEDULED,
            planned_date=NOW + timedelta(minutes=60),
        )

        counts = service.process_scheduled_reminders(NOW)

        assert counts["1hr"] == 1
        reloaded = _reload(db_session, intent.id)
        assert reloaded.notification_sent_dates == ["1hr-2026-10-19T12:00:00+00:00"]
        assert reloaded.reminder_version == 1

    def test_marks_accumulate_across_windows(self, db_session, service, requester):
        intent = create_intent(
            db_session, requester, IntentStatus.SCHEDULED, planned_date=NOW + timedelta(days=7)
        )
        with patch.object(service.notification_service, "send_notifications"):
            service.process_scheduled_reminders(NOW)
            service.process_scheduled_reminders(NOW + timedelta(days=6))

        assert _reload(db_session, intent.id).notification_sent_dates == [
            "7day-2026-10-19",
            "1day-2026-10-25",
        ]

    def test_lost_claim_is_skipped(self, db_session, service, requester):
        create_intent(
            db_session, requester, IntentStatus.SCHEDULED, planned_date=NOW + timedelta(days=7)
        )

        with (
            patch.object(service.intent_repo, "claim_reminder_mark", return_value=False),
            patch.object(service.notification_service, "send_notifications") as send,
        ):
            counts = service.process_scheduled_reminders(NOW)

        assert counts["7day"] == 0
        send.assert_not_called()

    def test_error_in_one_window_does_not_stop_others(self, db_session, service, requester):
        create_intent(
            db_session, requester, IntentStatus.SCHEDULED, planned_date=NOW + timedelta(days=1)
        )
        original = service.intent_repo.get_planned_between
        calls = []

        def flaky(start, end, statuses):
            calls.append(start)
            if len(calls) == 1:
                raise RuntimeError("query timeout")
            return original(start, end, statuses)

        with (
            patch.object(service.intent_repo, "get_planned_between", side_effect=flaky),
            patch.object(service.notification_service, "send_notifications"),
        ):
            counts = service.process_scheduled_reminders(NOW)

        assert counts == {"7day": 0, "1day": 1, "1hr": 0}


class TestClaimReminderMark:
    def test_stale_version_loses(self, db_session, requester):
        intent = create_intent(
            db_session, requester, IntentStatus.SCHEDULED, planned_date=NOW + timedelta(days=7)
        )
        repo = RefreshIntentRepository(db_session)
        stale = repo.get_by_id(intent.id)

        # A concurrent scanner claims first through its own session
        other = db_module.SessionLocal()
        try:
            other_repo = RefreshIntentRepository(other)
            assert other_repo.claim_reminder_mark(other_repo.get_by_id(intent.id), "7day-2026-10-19")
        finally:
            other.close()

        assert repo.claim_reminder_mark(stale, "7day-2026-10-19") is False
        reloaded = _reload(db_session, intent.id)
        assert reloaded.notification_sent_dates == ["7day-2026-10-19"]
        assert reloaded.reminder_version == 1

    def test_existing_mark_is_not_claimed_again(self, db_session, requester):
        intent = create_intent(
            db_session,
            requester,
            IntentStatus.SCHEDULED,
            notification_sent_dates=["1day-2026-10-19"],
        )
        repo = RefreshIntentRepository(db_session)
        assert repo.claim_reminder_mark(intent, "1day-2026-10-19") is False
