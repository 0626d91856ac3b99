"""In-app notification inbox endpoints for the signed-in user."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bookmyenv.core.auth import get_current_user
from bookmyenv.core.database import get_db
from bookmyenv.models.user import User
from bookmyenv.repositories.notification_repository import NotificationRepository
from bookmyenv.schemas.notification import NotificationCountResponse, NotificationResponse

router = APIRouter()


@router.get(
    "/",
    response_model=list[NotificationResponse],
    summary="List notifications",
    responses={401: {"description": "Unauthorized"}},
)
async def list_notifications(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    type: str | None = None,
    is_read: bool | None = None,
    order_by: str | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[NotificationResponse]:
    """List the current user's notifications with optional filters."""
    repo = NotificationRepository(db)
    notifications = repo.get_all(
        user_id=user.id,  # type: ignore[arg-type]
        skip=skip,
        limit=limit,
        type=type,
        is_read=is_read,
        order_by=order_by,
    )
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get(
    "/unread_count",
    response_model=NotificationCountResponse,
    summary="Get unread notification count",
    responses={401: {"description": "Unauthorized"}},
)
async def get_unread_count(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> NotificationCountResponse:
    repo = NotificationRepository(db)
    count = repo.count_unread(user.id)  # type: ignore[arg-type]
    return NotificationCountResponse(unread_count=count)


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read",
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "Notification not found"},
    },
)
async def mark_as_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> NotificationResponse:
    """Mark one of the current user's notifications as read."""
    repo = NotificationRepository(db)
    notification = repo.get_by_id(notification_id)
    if notification is None or notification.user_id != user.id:
        raise HTTPException(status_code=404, detail="Notification not found")
    updated = repo.mark_as_read(notification_id)
    return NotificationResponse.model_validate(updated)


@router.post(
    "/read_all",
    response_model=NotificationCountResponse,
    summary="Mark all notifications as read",
    responses={401: {"description": "Unauthorized"}},
)
async def mark_all_as_read(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> NotificationCountResponse:
    """Mark all unread notifications as read and return how many changed."""
    repo = NotificationRepository(db)
    count = repo.mark_all_as_read(user.id)  # type: ignore[arg-type]
    return NotificationCountResponse(unread_count=count)
