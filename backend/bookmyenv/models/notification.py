"""Notification model - a user's in-app inbox entry."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, func

from bookmyenv.core.database import Base
from bookmyenv.models.shared import UUIDType, generate_uuid


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(
        UUIDType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(String(50), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    message = Column(Text, nullable=False)
    related_entity_type = Column(String(50), nullable=True)
    related_entity_id = Column(UUIDType, nullable=True)
    action_url = Column(String(2048), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
