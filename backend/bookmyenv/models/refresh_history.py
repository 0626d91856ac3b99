"""RefreshHistory model - one row per finished refresh execution."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func

from bookmyenv.core.database import Base
from bookmyenv.models.shared import UUIDType, generate_uuid


class ExecutionStatus(str, Enum):
    SUCCESS = "SUCCESS"
    PARTIAL_SUCCESS = "PARTIAL_SUCCESS"
    FAILED = "FAILED"
    ROLLED_BACK = "ROLLED_BACK"


class RefreshHistory(Base):
    __tablename__ = "refresh_history"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    refresh_intent_id = Column(
        UUIDType,
        ForeignKey("refresh_intents.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(UUIDType, nullable=False, index=True)
    entity_name = Column(String(255), nullable=True)
    refresh_date = Column(DateTime(timezone=True), nullable=False)
    refresh_type = Column(String(50), nullable=False)
    source_environment_name = Column(String(255), nullable=True)
    requested_by_user_id = Column(UUIDType, nullable=True)
    executed_by_user_id = Column(UUIDType, nullable=True)
    execution_status = Column(String(50), nullable=False, default=ExecutionStatus.SUCCESS.value)
    duration_minutes = Column(Integer, nullable=True)
    data_volume_gb = Column(Numeric(12, 2), nullable=True)
    rows_affected = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
