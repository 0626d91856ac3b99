"""Refresh notification log schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class NotificationLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    refresh_intent_id: UUID
    event_type: str
    channel: str
    recipient_type: str
    recipient_id: UUID | None = None
    recipient_email: str | None = None
    recipient_webhook_url: str | None = None
    status: str
    subject: str | None = None
    message_body: str | None = None
    error_message: str | None = None
    sent_at: datetime
