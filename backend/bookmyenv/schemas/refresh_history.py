"""Refresh history schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class RefreshHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    refresh_intent_id: UUID | None = None
    entity_type: str
    entity_id: UUID
    entity_name: str | None = None
    refresh_date: datetime
    refresh_type: str
    source_environment_name: str | None = None
    requested_by_user_id: UUID | None = None
    executed_by_user_id: UUID | None = None
    execution_status: str
    duration_minutes: int | None = None
    data_volume_gb: Decimal | None = None
    rows_affected: int | None = None
    notes: str | None = None
    error_message: str | None = None
