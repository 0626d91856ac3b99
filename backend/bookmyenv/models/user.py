"""Users and user groups, used to resolve notification recipients."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, UniqueConstraint, func

from bookmyenv.core.database import Base
from bookmyenv.models.shared import UUIDType, generate_uuid


class UserRole(str, Enum):
    ADMIN = "Admin"
    ENVIRONMENT_MANAGER = "EnvironmentManager"
    PROJECT_LEAD = "ProjectLead"
    TESTER = "Tester"
    VIEWER = "Viewer"


class User(Base):
    __tablename__ = "users"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), nullable=True)
    display_name = Column(String(255), nullable=True)
    role = Column(String(50), nullable=False, default=UserRole.VIEWER.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class UserGroup(Base):
    __tablename__ = "user_groups"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class UserGroupMember(Base):
    __tablename__ = "user_group_members"
    __table_args__ = (UniqueConstraint("group_id", "user_id", name="uq_user_group_members"),)

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    group_id = Column(
        UUIDType,
        ForeignKey("user_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        UUIDType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
