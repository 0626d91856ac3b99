"""Refresh notification setting schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bookmyenv.models.refresh_intent import EntityType
from bookmyenv.models.refresh_notification import NotificationEvent, ScopeType


class NotificationSettingCreate(BaseModel):
    scope_type: ScopeType
    entity_type: EntityType | None = None
    entity_id: UUID | None = None
    group_id: UUID | None = None
    email_enabled: bool = False
    teams_webhook_url: str | None = Field(default=None, max_length=2048)
    slack_webhook_url: str | None = Field(default=None, max_length=2048)
    in_app_enabled: bool = False
    custom_webhook_url: str | None = Field(default=None, max_length=2048)
    subscribed_events: list[NotificationEvent] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_scope_target(self) -> "NotificationSettingCreate":
        if self.scope_type == ScopeType.ENTITY and (
            self.entity_type is None or self.entity_id is None
        ):
            raise ValueError("Entity scope requires entity_type and entity_id")
        if self.scope_type == ScopeType.GROUP and self.group_id is None:
            raise ValueError("Group scope requires group_id")
        return self


class NotificationSettingUpdate(BaseModel):
    email_enabled: bool | None = None
    teams_webhook_url: str | None = Field(default=None, max_length=2048)
    slack_webhook_url: str | None = Field(default=None, max_length=2048)
    in_app_enabled: bool | None = None
    custom_webhook_url: str | None = Field(default=None, max_length=2048)
    subscribed_events: list[NotificationEvent] | None = None


class NotificationSettingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    scope_type: str
    entity_type: str | None = None
    entity_id: UUID | None = None
    group_id: UUID | None = None
    email_enabled: bool
    teams_webhook_url: str | None = None
    slack_webhook_url: str | None = None
    in_app_enabled: bool
    custom_webhook_url: str | None = None
    subscribed_events: list[str]
    created_at: datetime
    updated_at: datetime
