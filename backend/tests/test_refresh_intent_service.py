"""Tests for refresh intent lifecycle transitions."""

import uuid
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from bookmyenv.core.database import get_db
from bookmyenv.models.refresh_history import ExecutionStatus, RefreshHistory
from bookmyenv.models.refresh_intent import EntityType, IntentStatus, RefreshType
from bookmyenv.schemas.refresh_intent import (
    CompleteIntentRequest,
    RefreshIntentCreate,
    RefreshIntentUpdate,
)
from bookmyenv.services.refresh_intent_service import RefreshIntentService
from tests.conftest import create_intent, create_user


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
    return RefreshIntentService(db_session)


@pytest.fixture
def requester(db_session):
    return create_user(db_session, "alice")


@pytest.fixture
def manager(db_session):
    return create_user(db_session, "mona", role="EnvironmentManager")


def _create_data(**overrides):
    data = {
        "entity_type": EntityType.ENVIRONMENT,
        "entity_id": uuid.uuid4(),
        "entity_name": "SIT1",
        "planned_date": datetime.now(UTC) + timedelta(days=10),
        "refresh_type": RefreshType.MASKED_COPY,
        "reason": "Refresh before UAT",
    }
    data.update(overrides)
    return RefreshIntentCreate(**data)


class TestCreate:
    def test_requires_approval_by_default(self, service, requester):
        group_id = uuid.uuid4()
        intent = service.create(_create_data(notification_groups=[group_id]), requester.id)
        assert intent.intent_status == "REQUESTED"
        assert intent.entity_type == "Environment"
        assert intent.refresh_type == "MASKED_COPY"
        assert intent.requested_by_user_id == requester.id
        assert intent.notification_groups == [str(group_id)]
        assert intent.notification_sent_dates == []
        assert intent.reminder_version == 0

    def test_without_approval_is_scheduled(self, service, requester):
        intent = service.create(_create_data(requires_approval=False), requester.id)
        assert intent.intent_status == "SCHEDULED"

    def test_naive_planned_date_stored_as_utc(self, service, requester):
        intent = service.create(_create_data(planned_date=datetime(2030, 1, 1, 8, 0)), requester.id)
        assert intent.planned_date.replace(tzinfo=None) == datetime(2030, 1, 1, 8, 0)

    def test_end_before_start_rejected(self, service, requester):
        start = datetime(2030, 1, 1, 8, 0, tzinfo=UTC)
        with pytest.raises(ValueError, match="planned_end_date"):
            service.create(
                _create_data(planned_date=start, planned_end_date=start - timedelta(hours=1)),
                requester.id,
            )


class TestUpdate:
    def test_update_requested_intent(self, service, db_session, requester):
        intent = create_intent(db_session, requester, IntentStatus.REQUESTED)
        updated = service.update(intent, RefreshIntentUpdate(reason="New reason"))
        assert updated.reason == "New reason"
        assert updated.entity_name == "SIT1"

    def test_update_ignores_explicit_null_for_required_fields(
        self, service, db_session, requester
    ):
        intent = create_intent(db_session, requester, IntentStatus.REQUESTED)
        planned = intent.planned_date
        updated = service.update(
            intent,
            RefreshIntentUpdate(planned_date=None, reason=None, notification_groups=None),
        )
        assert updated.planned_date == planned
        assert updated.reason == intent.reason
        assert updated.notification_groups == []

    @pytest.mark.parametrize("status", [IntentStatus.APPROVED, IntentStatus.COMPLETED])
    def test_update_locked_after_approval(self, service, db_session, requester, status):
        intent = create_intent(db_session, requester, status)
        with pytest.raises(ValueError, match="Cannot modify"):
            service.update(intent, RefreshIntentUpdate(reason="Too late"))


class TestApprovalFlow:
    def test_approve(self, service, db_session, requester, manager):
        intent = create_intent(db_session, requester, IntentStatus.REQUESTED)
        approved = service.approve(intent, manager.id, "Looks fine")
        assert approved.intent_status == "APPROVED"
        assert approved.approved_by_user_id == manager.id
        assert approved.approved_at is not None
        assert approved.approval_notes == "Looks fine"

    def test_approve_twice_fails(self, service, db_session, requester, manager):
        intent = create_intent(db_session, requester, IntentStatus.APPROVED)
        with pytest.raises(ValueError, match="Only REQUESTED intents can be approved"):
            service.approve(intent, manager.id)

    def test_reject_cancels(self, service, db_session, requester, manager):
        intent = create_intent(db_session, requester, IntentStatus.REQUESTED)
        rejected = service.reject(intent, manager.id, "Release freeze")
        assert rejected.intent_status == "CANCELLED"
        assert rejected.rejected_by_user_id == manager.id
        assert rejected.rejection_reason == "Release freeze"

    def test_schedule_with_new_date(self, service, db_session, requester):
        intent = create_intent(db_session, requester, IntentStatus.APPROVED)
        new_date = datetime(2031, 5, 1, 6, 0, tzinfo=UTC)
        scheduled = service.schedule(intent, new_date)
        assert scheduled.intent_status == "SCHEDULED"
        assert scheduled.planned_date.replace(tzinfo=None) == datetime(2031, 5, 1, 6, 0)

    def test_schedule_requires_approval(self, service, db_session, requester):
        intent = create_intent(db_session, requester, IntentStatus.REQUESTED)
        with pytest.raises(ValueError):
            service.schedule(intent)


class TestExecution:
    @pytest.mark.parametrize("status", [IntentStatus.APPROVED, IntentStatus.SCHEDULED])
    def test_start(self, service, db_session, requester, status):
        intent = create_intent(db_session, requester, status)
        started = service.start(intent)
        assert started.intent_status == "IN_PROGRESS"
        assert started.execution_started_at is not None

    def test_start_from_requested_fails(self, service, db_session, requester):
        intent = create_intent(db_session, requester, IntentStatus.REQUESTED)
        with pytest.raises(ValueError, match="APPROVED or SCHEDULED"):
            service.start(intent)

    def test_complete_records_history(self, service, db_session, requester, manager):
        intent = create_intent(db_session, requester, IntentStatus.IN_PROGRESS)
        data = CompleteIntentRequest(
            execution_notes="All good",
            duration_minutes=42,
            data_volume_gb=Decimal("12.5"),
            rows_affected=1000,
        )
        completed, history = service.complete(intent, manager.id, data)

        assert completed.intent_status == "COMPLETED"
        assert completed.execution_completed_at is not None
        assert history.refresh_intent_id == intent.id
        assert history.execution_status == "SUCCESS"
        assert history.executed_by_user_id == manager.id
        assert history.requested_by_user_id == requester.id
        assert history.entity_name == "SIT1"
        assert history.duration_minutes == 42
        assert history.data_volume_gb == Decimal("12.50")
        assert db_session.query(RefreshHistory).count() == 1

    def test_complete_with_failure_fails_intent(self, service, db_session, requester, manager):
        intent = create_intent(db_session, requester, IntentStatus.IN_PROGRESS)
        data = CompleteIntentRequest(
            execution_status=ExecutionStatus.FAILED, error_message="Disk full"
        )
        failed, history = service.complete(intent, manager.id, data)
        assert failed.intent_status == "FAILED"
        assert history.execution_status == "FAILED"
        assert history.error_message == "Disk full"

    def test_complete_requires_in_progress(self, service, db_session, requester, manager):
        intent = create_intent(db_session, requester, IntentStatus.SCHEDULED)
        with pytest.raises(ValueError, match="IN_PROGRESS"):
            service.complete(intent, manager.id, CompleteIntentRequest())
        assert db_session.query(RefreshHistory).count() == 0


class TestCancel:
    @pytest.mark.parametrize(
        "status",
        [IntentStatus.DRAFT, IntentStatus.REQUESTED, IntentStatus.APPROVED, IntentStatus.SCHEDULED],
    )
    def test_cancel(self, service, db_session, requester, status):
        intent = create_intent(db_session, requester, status)
        cancelled = service.cancel(intent)
        assert cancelled.intent_status == "CANCELLED"
        assert cancelled.execution_notes == "Cancelled by user"

    @pytest.mark.parametrize(
        "status",
        [
            IntentStatus.IN_PROGRESS,
            IntentStatus.COMPLETED,
            IntentStatus.FAILED,
            IntentStatus.CANCELLED,
            IntentStatus.ROLLED_BACK,
        ],
    )
    def test_cancel_not_allowed(self, service, db_session, requester, status):
        intent = create_intent(db_session, requester, status)
        with pytest.raises(ValueError, match="Cannot cancel"):
            service.cancel(intent, "Changed plans")
