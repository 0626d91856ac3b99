"""Refresh statistics and calendar API endpoints."""

from datetime import UTC, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bookmyenv.core.auth import get_current_user
from bookmyenv.core.database import get_db
from bookmyenv.models.refresh_intent import EntityType
from bookmyenv.models.shared import ensure_utc
from bookmyenv.models.user import User
from bookmyenv.repositories.refresh_overview_repository import RefreshOverviewRepository
from bookmyenv.schemas.refresh_overview import (
    CalendarHistoryItem,
    CalendarIntentItem,
    EntityTypeCount,
    RefreshCalendarResponse,
    RefreshHistoryStats,
    RefreshStatisticsResponse,
    RefreshSummary,
    RefreshTypeCount,
)

router = APIRouter()


@router.get(
    "/statistics",
    response_model=RefreshStatisticsResponse,
    summary="Get refresh statistics",
    responses={401: {"description": "Unauthorized"}},
)
async def get_refresh_statistics(
    period: int = Query(default=30, ge=1, le=365, description="History window in days"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> RefreshStatisticsResponse:
    """Pending and upcoming counts, plus history totals over the last ``period`` days."""
    repo = RefreshOverviewRepository(db)
    now = datetime.now(UTC)
    since = now - timedelta(days=period)
    totals = repo.history_totals(since)
    return RefreshStatisticsResponse(
        summary=RefreshSummary(
            pending_approvals=repo.count_pending_approvals(),
            upcoming_refreshes=repo.count_upcoming(now),
        ),
        history_stats=RefreshHistoryStats(
            success_count=totals.success_count,
            failed_count=totals.failed_count,
            total_count=totals.total_count,
            avg_duration_minutes=totals.avg_duration_minutes,
        ),
        by_entity_type=[
            EntityTypeCount(entity_type=row.key, count=row.count)
            for row in repo.history_by_entity_type(since)
        ],
        by_refresh_type=[
            RefreshTypeCount(refresh_type=row.key, count=row.count)
            for row in repo.history_by_refresh_type(since)
        ],
        period=period,
    )


@router.get(
    "/calendar",
    response_model=RefreshCalendarResponse,
    summary="Get refresh calendar",
    responses={
        400: {"description": "start_date is after end_date"},
        401: {"description": "Unauthorized"},
    },
)
async def get_refresh_calendar(
    start_date: datetime = Query(..., description="Range start (ISO 8601)"),
    end_date: datetime = Query(..., description="Range end (ISO 8601)"),
    entity_type: EntityType | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> RefreshCalendarResponse:
    """Open intents overlapping the range and refreshes executed within it."""
    if ensure_utc(start_date) > ensure_utc(end_date):
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    repo = RefreshOverviewRepository(db)
    intents = repo.calendar_intents(
        start_date, end_date, entity_type.value if entity_type is not None else None
    )
    return RefreshCalendarResponse(
        intents=[
            CalendarIntentItem.model_validate(intent).model_copy(
                update={
                    "requested_by_username": (
                        intent.requested_by.username if intent.requested_by else None
                    )
                }
            )
            for intent in intents
        ],
        history=[
            CalendarHistoryItem.model_validate(row)
            for row in repo.calendar_history(start_date, end_date)
        ],
    )
