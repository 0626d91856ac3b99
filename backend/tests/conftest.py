"""Shared test fixtures for all test modules."""

import contextlib
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import bookmyenv.models  # noqa: F401
from bookmyenv.core import database as db_module
from bookmyenv.core.auth import create_access_token
from bookmyenv.core.database import Base
from bookmyenv.models.refresh_intent import IntentStatus, RefreshIntent
from bookmyenv.models.refresh_notification import RefreshNotificationSetting, ScopeType
from bookmyenv.models.user import User, UserGroup
from bookmyenv.repositories.user_repository import UserGroupRepository, UserRepository

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    # Patch module-level engine and session factory
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    # Restore originals
    db_module.engine = original_engine
    db_module.SessionLocal = original_session


def create_user(
    db: Session,
    username: str | None = None,
    role: str = "Tester",
    email: str | None = "",
    is_active: bool = True,
) -> User:
    """Insert a user. An empty ``email`` derives one from the username."""
    username = username or f"user-{uuid.uuid4().hex[:8]}"
    return UserRepository(db).create(
        username=username,
        email=f"{username}@example.com" if email == "" else email,
        display_name=username.title(),
        role=role,
        is_active=is_active,
    )


def create_group(db: Session, *members: User, name: str | None = None) -> UserGroup:
    repo = UserGroupRepository(db)
    group = repo.create(name=name or f"group-{uuid.uuid4().hex[:8]}")
    for member in members:
        repo.add_member(group.id, member.id)
    db.refresh(group)
    return group


def create_intent(
    db: Session,
    requester: User | None = None,
    status: IntentStatus = IntentStatus.REQUESTED,
    planned_date: datetime | None = None,
    **fields: Any,
) -> RefreshIntent:
    values: dict[str, Any] = {
        "entity_type": "Environment",
        "entity_id": uuid.uuid4(),
        "entity_name": "SIT1",
        "intent_status": status.value,
        "planned_date": planned_date or datetime.now(UTC) + timedelta(days=3),
        "refresh_type": "FULL_COPY",
        "source_environment_name": "PROD",
        "reason": "Quarterly data refresh",
        "requested_by_user_id": requester.id if requester else None,
        "notification_groups": [],
        "notification_sent_dates": [],
    }
    values.update(fields)
    intent = RefreshIntent(**values)
    db.add(intent)
    db.commit()
    db.refresh(intent)
    return intent


def create_setting(
    db: Session,
    scope_type: ScopeType = ScopeType.GLOBAL,
    subscribed_events: list[str] | None = None,
    **fields: Any,
) -> RefreshNotificationSetting:
    setting = RefreshNotificationSetting(
        scope_type=scope_type.value,
        subscribed_events=subscribed_events or [],
        **fields,
    )
    db.add(setting)
    db.commit()
    db.refresh(setting)
    return setting


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}  # type: ignore[arg-type]
