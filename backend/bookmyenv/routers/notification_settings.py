"""Refresh notification setting API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bookmyenv.core.auth import get_current_user, require_role
from bookmyenv.core.database import get_db
from bookmyenv.models.refresh_notification import RefreshNotificationSetting
from bookmyenv.models.user import User, UserRole
from bookmyenv.repositories.notification_setting_repository import NotificationSettingRepository
from bookmyenv.schemas.notification_setting import (
    NotificationSettingCreate,
    NotificationSettingResponse,
    NotificationSettingUpdate,
)

router = APIRouter()

require_manager = require_role(UserRole.ADMIN, UserRole.ENVIRONMENT_MANAGER)


@router.post(
    "/",
    response_model=NotificationSettingResponse,
    status_code=201,
    summary="Create notification setting",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        422: {"description": "Validation error"},
    },
)
async def create_notification_setting(
    data: NotificationSettingCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_manager),
) -> RefreshNotificationSetting:
    """Create a notification setting for an entity, a group or everything."""
    return NotificationSettingRepository(db).create(data)


@router.get(
    "/",
    response_model=list[NotificationSettingResponse],
    summary="List notification settings",
    responses={401: {"description": "Unauthorized"}},
)
async def list_notification_settings(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    scope_type: str | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[RefreshNotificationSetting]:
    return NotificationSettingRepository(db).get_all(
        skip=skip, limit=limit, scope_type=scope_type
    )


@router.get(
    "/{setting_id}",
    response_model=NotificationSettingResponse,
    summary="Get notification setting",
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "Notification setting not found"},
    },
)
async def get_notification_setting(
    setting_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> RefreshNotificationSetting:
    setting = NotificationSettingRepository(db).get_by_id(setting_id)
    if not setting:
        raise HTTPException(status_code=404, detail="Notification setting not found")
    return setting


@router.put(
    "/{setting_id}",
    response_model=NotificationSettingResponse,
    summary="Update notification setting",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Notification setting not found"},
        422: {"description": "Validation error"},
    },
)
async def update_notification_setting(
    setting_id: UUID,
    data: NotificationSettingUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_manager),
) -> RefreshNotificationSetting:
    setting = NotificationSettingRepository(db).update(setting_id, data)
    if not setting:
        raise HTTPException(status_code=404, detail="Notification setting not found")
    return setting


@router.delete(
    "/{setting_id}",
    status_code=204,
    summary="Delete notification setting",
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Notification setting not found"},
    },
)
async def delete_notification_setting(
    setting_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_manager),
) -> None:
    if not NotificationSettingRepository(db).delete(setting_id):
        raise HTTPException(status_code=404, detail="Notification setting not found")
