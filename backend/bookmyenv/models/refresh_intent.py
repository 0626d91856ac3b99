"""RefreshIntent model - a request to refresh an entity from a source."""

from enum import Enum

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from bookmyenv.core.database import Base
from bookmyenv.models.shared import UUIDType, generate_uuid


class EntityType(str, Enum):
    ENVIRONMENT = "Environment"
    ENVIRONMENT_INSTANCE = "EnvironmentInstance"
    APPLICATION = "Application"
    APP_COMPONENT = "AppComponent"
    INTERFACE = "Interface"
    INFRA_COMPONENT = "InfraComponent"
    TEST_DATA_SET = "TestDataSet"


class RefreshType(str, Enum):
    FULL_COPY = "FULL_COPY"
    PARTIAL_COPY = "PARTIAL_COPY"
    DATA_ONLY = "DATA_ONLY"
    CONFIG_ONLY = "CONFIG_ONLY"
    MASKED_COPY = "MASKED_COPY"
    SCHEMA_SYNC = "SCHEMA_SYNC"
    GOLDEN_COPY = "GOLDEN_COPY"
    POINT_IN_TIME = "POINT_IN_TIME"
    OTHER = "OTHER"


class IntentStatus(str, Enum):
    DRAFT = "DRAFT"
    REQUESTED = "REQUESTED"
    APPROVED = "APPROVED"
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    ROLLED_BACK = "ROLLED_BACK"


class RefreshIntent(Base):
    __tablename__ = "refresh_intents"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(UUIDType, nullable=False, index=True)
    entity_name = Column(String(255), nullable=True)
    intent_status = Column(String(50), nullable=False, default=IntentStatus.REQUESTED.value, index=True)
    planned_date = Column(DateTime(timezone=True), nullable=False, index=True)
    planned_end_date = Column(DateTime(timezone=True), nullable=True)
    refresh_type = Column(String(50), nullable=False)
    source_environment_name = Column(String(255), nullable=True)
    requires_downtime = Column(Boolean, nullable=False, default=False)
    estimated_downtime_minutes = Column(Integer, nullable=True)
    reason = Column(Text, nullable=False)
    business_justification = Column(Text, nullable=True)
    requires_approval = Column(Boolean, nullable=False, default=True)
    change_ticket_ref = Column(String(100), nullable=True)

    requested_by_user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    approved_by_user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    approved_at = Column(DateTime(timezone=True), nullable=True)
    approval_notes = Column(Text, nullable=True)
    rejected_by_user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    execution_started_at = Column(DateTime(timezone=True), nullable=True)
    execution_completed_at = Column(DateTime(timezone=True), nullable=True)
    execution_notes = Column(Text, nullable=True)

    # Group ids whose notification settings apply to this intent
    notification_groups = Column(JSON, nullable=False, default=list)
    # Reminder mark tokens already sent (append-only), guarded by reminder_version
    notification_sent_dates = Column(JSON, nullable=False, default=list)
    reminder_version = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    requested_by = relationship("User", foreign_keys=[requested_by_user_id], lazy="joined")
