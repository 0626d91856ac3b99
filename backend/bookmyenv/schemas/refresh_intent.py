"""Refresh intent schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from bookmyenv.models.refresh_history import ExecutionStatus
from bookmyenv.models.refresh_intent import EntityType, RefreshType


class RefreshIntentCreate(BaseModel):
    entity_type: EntityType
    entity_id: UUID
    entity_name: str | None = Field(default=None, max_length=255)
    planned_date: datetime
    planned_end_date: datetime | None = None
    refresh_type: RefreshType
    source_environment_name: str | None = Field(default=None, max_length=255)
    requires_downtime: bool = False
    estimated_downtime_minutes: int | None = Field(default=None, ge=0)
    reason: str = Field(min_length=1)
    business_justification: str | None = None
    requires_approval: bool = True
    change_ticket_ref: str | None = Field(default=None, max_length=100)
    notification_groups: list[UUID] = Field(default_factory=list)


class RefreshIntentUpdate(BaseModel):
    planned_date: datetime | None = None
    planned_end_date: datetime | None = None
    refresh_type: RefreshType | None = None
    source_environment_name: str | None = Field(default=None, max_length=255)
    requires_downtime: bool | None = None
    estimated_downtime_minutes: int | None = Field(default=None, ge=0)
    reason: str | None = Field(default=None, min_length=1)
    business_justification: str | None = None
    change_ticket_ref: str | None = Field(default=None, max_length=100)
    notification_groups: list[UUID] | None = None


class ApproveIntentRequest(BaseModel):
    approval_notes: str | None = None


class RejectIntentRequest(BaseModel):
    rejection_reason: str = Field(min_length=1)


class ScheduleIntentRequest(BaseModel):
    planned_date: datetime | None = None


class CompleteIntentRequest(BaseModel):
    execution_status: ExecutionStatus = ExecutionStatus.SUCCESS
    execution_notes: str | None = None
    duration_minutes: int | None = Field(default=None, ge=0)
    data_volume_gb: Decimal | None = Field(default=None, ge=0)
    rows_affected: int | None = Field(default=None, ge=0)
    error_message: str | None = None


class CancelIntentRequest(BaseModel):
    cancellation_reason: str | None = None


class RefreshIntentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    entity_type: str
    entity_id: UUID
    entity_name: str | None = None
    intent_status: str
    planned_date: datetime
    planned_end_date: datetime | None = None
    refresh_type: str
    source_environment_name: str | None = None
    requires_downtime: bool
    estimated_downtime_minutes: int | None = None
    reason: str
    business_justification: str | None = None
    requires_approval: bool
    change_ticket_ref: str | None = None
    requested_by_user_id: UUID | None = None
    approved_by_user_id: UUID | None = None
    approved_at: datetime | None = None
    approval_notes: str | None = None
    rejected_by_user_id: UUID | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    execution_started_at: datetime | None = None
    execution_completed_at: datetime | None = None
    execution_notes: str | None = None
    notification_groups: list[UUID]
    notification_sent_dates: list[str]
    created_at: datetime
    updated_at: datetime
