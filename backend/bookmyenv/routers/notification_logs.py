"""Refresh notification audit log API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from bookmyenv.core.auth import require_role
from bookmyenv.core.database import get_db
from bookmyenv.models.refresh_notification import RefreshNotificationLog
from bookmyenv.models.user import User, UserRole
from bookmyenv.repositories.notification_log_repository import NotificationLogRepository
from bookmyenv.schemas.notification_log import NotificationLogResponse

router = APIRouter()


@router.get(
    "/",
    response_model=list[NotificationLogResponse],
    summary="List notification dispatch log",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
    },
)
async def list_notification_logs(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    refresh_intent_id: UUID | None = Query(default=None),
    event_type: str | None = Query(default=None),
    channel: str | None = Query(default=None),
    status: str | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(require_role(UserRole.ADMIN, UserRole.ENVIRONMENT_MANAGER)),
) -> list[RefreshNotificationLog]:
    """List every dispatch attempt, newest first, including failures."""
    repo = NotificationLogRepository(db)
    response.headers["X-Total-Count"] = str(
        repo.count(refresh_intent_id, event_type, channel, status)
    )
    return repo.get_all(
        skip=skip,
        limit=limit,
        refresh_intent_id=refresh_intent_id,
        event_type=event_type,
        channel=channel,
        status=status,
    )
