"""Aggregate queries behind the refresh statistics and calendar views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import and_, case, or_
from sqlalchemy import func as sa_func
from sqlalchemy.orm import Session

from bookmyenv.models.refresh_history import ExecutionStatus, RefreshHistory
from bookmyenv.models.refresh_intent import IntentStatus, RefreshIntent
from bookmyenv.models.shared import ensure_utc

UPCOMING_STATUSES = (IntentStatus.APPROVED.value, IntentStatus.SCHEDULED.value)
CLOSED_STATUSES = (
    IntentStatus.CANCELLED.value,
    IntentStatus.COMPLETED.value,
    IntentStatus.FAILED.value,
    IntentStatus.ROLLED_BACK.value,
)


@dataclass
class HistoryTotals:
    success_count: int
    failed_count: int
    total_count: int
    avg_duration_minutes: int


@dataclass
class GroupCount:
    key: str
    count: int


class RefreshOverviewRepository:
    def __init__(self, db: Session):
        self.db = db

    def count_pending_approvals(self) -> int:
        return (
            self.db.query(sa_func.count(RefreshIntent.id))
            .filter(RefreshIntent.intent_status == IntentStatus.REQUESTED.value)
            .scalar()
            or 0
        )

    def count_upcoming(self, now: datetime, days: int = 7) -> int:
        """Approved or scheduled intents planned no later than ``days`` from now."""
        horizon = ensure_utc(now) + timedelta(days=days)
        return (
            self.db.query(sa_func.count(RefreshIntent.id))
            .filter(
                RefreshIntent.intent_status.in_(UPCOMING_STATUSES),
                RefreshIntent.planned_date <= horizon,
            )
            .scalar()
            or 0
        )

    def history_totals(self, since: datetime) -> HistoryTotals:
        row = (
            self.db.query(
                sa_func.sum(
                    case(
                        (RefreshHistory.execution_status == ExecutionStatus.SUCCESS.value, 1),
                        else_=0,
                    )
                ),
                sa_func.sum(
                    case(
                        (RefreshHistory.execution_status == ExecutionStatus.FAILED.value, 1),
                        else_=0,
                    )
                ),
                sa_func.count(RefreshHistory.id),
                sa_func.avg(RefreshHistory.duration_minutes),
            )
            .filter(RefreshHistory.refresh_date >= ensure_utc(since))
            .one()
        )
        success, failed, total, avg_duration = row
        return HistoryTotals(
            success_count=int(success or 0),
            failed_count=int(failed or 0),
            total_count=int(total or 0),
            avg_duration_minutes=round(float(avg_duration or 0)),
        )

    def history_by_entity_type(self, since: datetime) -> list[GroupCount]:
        return self._history_grouped(RefreshHistory.entity_type, since)

    def history_by_refresh_type(self, since: datetime) -> list[GroupCount]:
        return self._history_grouped(RefreshHistory.refresh_type, since)

    def _history_grouped(self, column, since: datetime) -> list[GroupCount]:  # type: ignore[no-untyped-def]
        count = sa_func.count(RefreshHistory.id)
        rows = (
            self.db.query(column, count)
            .filter(RefreshHistory.refresh_date >= ensure_utc(since))
            .group_by(column)
            .order_by(count.desc(), column)
            .all()
        )
        return [GroupCount(key=key, count=int(n)) for key, n in rows]

    def calendar_intents(
        self,
        start: datetime,
        end: datetime,
        entity_type: str | None = None,
    ) -> list[RefreshIntent]:
        """Open intents whose planned span overlaps [start, end]."""
        start, end = ensure_utc(start), ensure_utc(end)
        span_end = sa_func.coalesce(RefreshIntent.planned_end_date, RefreshIntent.planned_date)
        query = self.db.query(RefreshIntent).filter(
            RefreshIntent.intent_status.notin_(CLOSED_STATUSES),
            or_(
                RefreshIntent.planned_date.between(start, end),
                RefreshIntent.planned_end_date.between(start, end),
                and_(RefreshIntent.planned_date <= start, span_end >= end),
            ),
        )
        if entity_type is not None:
            query = query.filter(RefreshIntent.entity_type == entity_type)
        return query.order_by(RefreshIntent.planned_date).all()

    def calendar_history(self, start: datetime, end: datetime) -> list[RefreshHistory]:
        return (
            self.db.query(RefreshHistory)
            .filter(RefreshHistory.refresh_date.between(ensure_utc(start), ensure_utc(end)))
            .order_by(RefreshHistory.refresh_date)
            .all()
        )
