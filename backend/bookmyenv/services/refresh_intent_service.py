"""Status transitions for refresh intents."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from bookmyenv.models.refresh_history import ExecutionStatus, RefreshHistory
from bookmyenv.models.refresh_intent import IntentStatus, RefreshIntent
from bookmyenv.models.shared import ensure_utc
from bookmyenv.repositories.refresh_history_repository import RefreshHistoryRepository
from bookmyenv.repositories.refresh_intent_repository import RefreshIntentRepository
from bookmyenv.schemas.refresh_intent import (
    CompleteIntentRequest,
    RefreshIntentCreate,
    RefreshIntentUpdate,
)

EDITABLE_STATUSES = {IntentStatus.DRAFT.value, IntentStatus.REQUESTED.value}
STARTABLE_STATUSES = {IntentStatus.APPROVED.value, IntentStatus.SCHEDULED.value}
NON_CANCELLABLE_STATUSES = {
    IntentStatus.COMPLETED.value,
    IntentStatus.FAILED.value,
    IntentStatus.CANCELLED.value,
    IntentStatus.ROLLED_BACK.value,
    IntentStatus.IN_PROGRESS.value,
}
# Columns an update may not null out
REQUIRED_FIELDS = {"planned_date", "refresh_type", "reason", "requires_downtime"}


def _column_values(fields: dict[str, Any]) -> dict[str, Any]:
    """Convert schema values into what the intent columns store."""
    values: dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, datetime):
            value = ensure_utc(value)
        elif key == "notification_groups":
            value = [str(group_id) for group_id in value or []]
        values[key] = value
    return values


class RefreshIntentService:
    """Validates and applies refresh intent lifecycle transitions.

    Invalid transitions raise ValueError. Notifications are not sent here;
    callers raise the matching event once the transition is committed.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = RefreshIntentRepository(db)
        self.history_repo = RefreshHistoryRepository(db)

    def create(self, data: RefreshIntentCreate, requested_by: UUID | None) -> RefreshIntent:
        values = _column_values(data.model_dump())
        self._check_dates(values.get("planned_date"), values.get("planned_end_date"))
        status = IntentStatus.REQUESTED if data.requires_approval else IntentStatus.SCHEDULED
        return self.repo.create(
            **values,
            intent_status=status.value,
            requested_by_user_id=requested_by,
            notification_sent_dates=[],
        )

    def update(self, intent: RefreshIntent, data: RefreshIntentUpdate) -> RefreshIntent:
        if intent.intent_status not in EDITABLE_STATUSES:
            raise ValueError(
                "Cannot modify intent in current status. "
                "Only DRAFT and REQUESTED intents can be edited."
            )
        values = {
            key: value
            for key, value in _column_values(data.model_dump(exclude_unset=True)).items()
            if value is not None or key not in REQUIRED_FIELDS
        }
        self._check_dates(
            values.get("planned_date", intent.planned_date),
            values.get("planned_end_date", intent.planned_end_date),
        )
        return self.repo.update(intent, **values)

    def approve(
        self, intent: RefreshIntent, approved_by: UUID, approval_notes: str | None = None
    ) -> RefreshIntent:
        self._require_status(intent, {IntentStatus.REQUESTED.value}, "approved")
        return self.repo.update(
            intent,
            intent_status=IntentStatus.APPROVED.value,
            approved_by_user_id=approved_by,
            approved_at=datetime.now(UTC),
            approval_notes=approval_notes,
        )

    def reject(self, intent: RefreshIntent, rejected_by: UUID, reason: str) -> RefreshIntent:
        self._require_status(intent, {IntentStatus.REQUESTED.value}, "rejected")
        return self.repo.update(
            intent,
            intent_status=IntentStatus.CANCELLED.value,
            rejected_by_user_id=rejected_by,
            rejected_at=datetime.now(UTC),
            rejection_reason=reason,
        )

    def schedule(
        self, intent: RefreshIntent, planned_date: datetime | None = None
    ) -> RefreshIntent:
        self._require_status(intent, {IntentStatus.APPROVED.value}, "scheduled")
        fields: dict[str, Any] = {"intent_status": IntentStatus.SCHEDULED.value}
        if planned_date is not None:
            self._check_dates(planned_date, intent.planned_end_date)
            fields["planned_date"] = ensure_utc(planned_date)
        return self.repo.update(intent, **fields)

    def start(self, intent: RefreshIntent) -> RefreshIntent:
        if intent.intent_status not in STARTABLE_STATUSES:
            raise ValueError("Intent must be APPROVED or SCHEDULED to start execution")
        return self.repo.update(
            intent,
            intent_status=IntentStatus.IN_PROGRESS.value,
            execution_started_at=datetime.now(UTC),
        )

    def complete(
        self,
        intent: RefreshIntent,
        executed_by: UUID,
        data: CompleteIntentRequest,
    ) -> tuple[RefreshIntent, RefreshHistory]:
        """Finish an in-progress intent and record a history row.

        A ``FAILED`` execution status moves the intent to FAILED; any other
        status completes it.
        """
        if intent.intent_status != IntentStatus.IN_PROGRESS.value:
            raise ValueError("Intent must be IN_PROGRESS to complete")

        now = datetime.now(UTC)
        failed = data.execution_status == ExecutionStatus.FAILED
        history = self.history_repo.create(
            commit=False,
            refresh_intent_id=intent.id,
            entity_type=intent.entity_type,
            entity_id=intent.entity_id,
            entity_name=intent.entity_name,
            refresh_date=now,
            refresh_type=intent.refresh_type,
            source_environment_name=intent.source_environment_name,
            requested_by_user_id=intent.requested_by_user_id,
            executed_by_user_id=executed_by,
            execution_status=data.execution_status.value,
            duration_minutes=data.duration_minutes,
            data_volume_gb=data.data_volume_gb,
            rows_affected=data.rows_affected,
            notes=data.execution_notes,
            error_message=data.error_message,
        )
        intent = self.repo.update(
            intent,
            intent_status=(IntentStatus.FAILED if failed else IntentStatus.COMPLETED).value,
            execution_completed_at=now,
            execution_notes=data.execution_notes,
        )
        self.db.refresh(history)
        return intent, history

    def cancel(self, intent: RefreshIntent, reason: str | None = None) -> RefreshIntent:
        if intent.intent_status in NON_CANCELLABLE_STATUSES:
            raise ValueError("Cannot cancel intent in current status")
        return self.repo.update(
            intent,
            intent_status=IntentStatus.CANCELLED.value,
            execution_notes=reason or "Cancelled by user",
        )

    @staticmethod
    def _require_status(intent: RefreshIntent, allowed: set[str], action: str) -> None:
        if intent.intent_status not in allowed:
            expected = " or ".join(sorted(allowed))
            raise ValueError(f"Only {expected} intents can be {action}")

    @staticmethod
    def _check_dates(start: datetime | None, end: datetime | None) -> None:
        if start is not None and end is not None and ensure_utc(end) <= ensure_utc(start):
            raise ValueError("planned_end_date must be after planned_date")
