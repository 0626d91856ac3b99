"""Refresh statistics and calendar schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class RefreshSummary(BaseModel):
    pending_approvals: int
    upcoming_refreshes: int


class RefreshHistoryStats(BaseModel):
    success_count: int
    failed_count: int
    total_count: int
    avg_duration_minutes: int


class EntityTypeCount(BaseModel):
    entity_type: str
    count: int


class RefreshTypeCount(BaseModel):
    refresh_type: str
    count: int


class RefreshStatisticsResponse(BaseModel):
    summary: RefreshSummary
    history_stats: RefreshHistoryStats
    by_entity_type: list[EntityTypeCount]
    by_refresh_type: list[RefreshTypeCount]
    period: int


class CalendarIntentItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    entity_type: str
    entity_id: UUID
    entity_name: str | None = None
    intent_status: str
    planned_date: datetime
    planned_end_date: datetime | None = None
    refresh_type: str
    requires_downtime: bool
    requested_by_username: str | None = None


class CalendarHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    entity_type: str
    entity_id: UUID
    entity_name: str | None = None
    refresh_date: datetime
    refresh_type: str
    execution_status: str


class RefreshCalendarResponse(BaseModel):
    intents: list[CalendarIntentItem]
    history: list[CalendarHistoryItem]
