"""Refresh intent API endpoints."""

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from bookmyenv.core.auth import get_current_user, require_role
from bookmyenv.core.config import settings
from bookmyenv.core.database import get_db
from bookmyenv.models.refresh_intent import IntentStatus, RefreshIntent
from bookmyenv.models.refresh_notification import NotificationEvent
from bookmyenv.models.user import User, UserRole
from bookmyenv.repositories.notification_log_repository import NotificationLogRepository
from bookmyenv.repositories.refresh_intent_repository import RefreshIntentRepository
from bookmyenv.schemas.notification_log import NotificationLogResponse
from bookmyenv.schemas.refresh_intent import (
    ApproveIntentRequest,
    CancelIntentRequest,
    CompleteIntentRequest,
    RefreshIntentCreate,
    RefreshIntentResponse,
    RefreshIntentUpdate,
    RejectIntentRequest,
    ScheduleIntentRequest,
)
from bookmyenv.services.refresh_intent_service import RefreshIntentService
from bookmyenv.services.refresh_notification_service import RefreshNotificationService
from bookmyenv.tasks import enqueue_refresh_notifications

logger = logging.getLogger(__name__)

router = APIRouter()

MANAGERS = (UserRole.ADMIN, UserRole.ENVIRONMENT_MANAGER)
LEADS = (*MANAGERS, UserRole.PROJECT_LEAD)
REQUESTERS = (*LEADS, UserRole.TESTER)


async def notify(
    db: Session,
    intent_id: UUID,
    event: NotificationEvent,
    extra: dict[str, Any] | None = None,
) -> None:
    """Send the event inline or hand it to the worker, never failing the request."""
    if settings.NOTIFICATION_DISPATCH_MODE == "worker":
        try:
            await enqueue_refresh_notifications(intent_id, event.value, extra)
        except Exception:
            logger.exception("Failed to enqueue %s notifications for intent %s", event, intent_id)
        return
    RefreshNotificationService(db).send_notifications(intent_id, event, extra)


def _get_intent_or_404(db: Session, intent_id: UUID) -> RefreshIntent:
    intent = RefreshIntentRepository(db).get_by_id(intent_id)
    if not intent:
        raise HTTPException(status_code=404, detail="Refresh intent not found")
    return intent


@router.post(
    "/",
    response_model=RefreshIntentResponse,
    status_code=201,
    summary="Create refresh intent",
    responses={
        400: {"description": "Invalid planned dates"},
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        422: {"description": "Validation error"},
    },
)
async def create_refresh_intent(
    data: RefreshIntentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_role(*REQUESTERS)),
) -> RefreshIntentResponse:
    """Request a refresh. Intents that skip approval are scheduled immediately."""
    service = RefreshIntentService(db)
    try:
        intent = service.create(data, requested_by=user.id)  # type: ignore[arg-type]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    result = RefreshIntentResponse.model_validate(intent)
    event = (
        NotificationEvent.REFRESH_REQUESTED
        if result.intent_status == IntentStatus.REQUESTED.value
        else NotificationEvent.REFRESH_SCHEDULED
    )
    await notify(db, result.id, event)
    return result


@router.get(
    "/",
    response_model=list[RefreshIntentResponse],
    summary="List refresh intents",
    responses={401: {"description": "Unauthorized"}},
)
async def list_refresh_intents(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    status: str | None = Query(default=None),
    entity_type: str | None = Query(default=None),
    entity_id: UUID | None = Query(default=None),
    pending_approval: bool = Query(default=False),
    order_by: str | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[RefreshIntent]:
    """List refresh intents, soonest planned first by default."""
    repo = RefreshIntentRepository(db)
    response.headers["X-Total-Count"] = str(
        repo.count(status, entity_type, entity_id, pending_approval)
    )
    return repo.get_all(
        skip=skip,
        limit=limit,
        status=status,
        entity_type=entity_type,
        entity_id=entity_id,
        pending_approval=pending_approval,
        order_by=order_by,
    )


@router.get(
    "/{intent_id}",
    response_model=RefreshIntentResponse,
    summary="Get refresh intent",
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "Refresh intent not found"},
    },
)
async def get_refresh_intent(
    intent_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> RefreshIntent:
    return _get_intent_or_404(db, intent_id)


@router.put(
    "/{intent_id}",
    response_model=RefreshIntentResponse,
    summary="Update refresh intent",
    responses={
        400: {"description": "Intent can no longer be edited"},
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Refresh intent not found"},
    },
)
async def update_refresh_intent(
    intent_id: UUID,
    data: RefreshIntentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_role(*LEADS)),
) -> RefreshIntent:
    """Edit a DRAFT or REQUESTED intent."""
    intent = _get_intent_or_404(db, intent_id)
    try:
        return RefreshIntentService(db).update(intent, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None


@router.post(
    "/{intent_id}/approve",
    response_model=RefreshIntentResponse,
    summary="Approve refresh intent",
    responses={
        400: {"description": "Intent is not awaiting approval"},
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Refresh intent not found"},
    },
)
async def approve_refresh_intent(
    intent_id: UUID,
    data: ApproveIntentRequest | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_role(*MANAGERS)),
) -> RefreshIntentResponse:
    intent = _get_intent_or_404(db, intent_id)
    notes = data.approval_notes if data else None
    try:
        intent = RefreshIntentService(db).approve(intent, user.id, notes)  # type: ignore[arg-type]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    result = RefreshIntentResponse.model_validate(intent)
    await notify(db, result.id, NotificationEvent.REFRESH_APPROVED, {"approval_notes": notes})
    return result


@router.post(
    "/{intent_id}/reject",
    response_model=RefreshIntentResponse,
    summary="Reject refresh intent",
    responses={
        400: {"description": "Intent is not awaiting approval"},
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Refresh intent not found"},
        422: {"description": "Rejection reason is required"},
    },
)
async def reject_refresh_intent(
    intent_id: UUID,
    data: RejectIntentRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_role(*MANAGERS)),
) -> RefreshIntentResponse:
    intent = _get_intent_or_404(db, intent_id)
    try:
        intent = RefreshIntentService(db).reject(
            intent, user.id, data.rejection_reason  # type: ignore[arg-type]
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    result = RefreshIntentResponse.model_validate(intent)
    await notify(
        db,
        result.id,
        NotificationEvent.REFRESH_REJECTED,
        {"rejection_reason": data.rejection_reason},
    )
    return result


@router.post(
    "/{intent_id}/schedule",
    response_model=RefreshIntentResponse,
    summary="Schedule refresh intent",
    responses={
        400: {"description": "Intent is not approved"},
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Refresh intent not found"},
    },
)
async def schedule_refresh_intent(
    intent_id: UUID,
    data: ScheduleIntentRequest | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_role(*MANAGERS)),
) -> RefreshIntentResponse:
    intent = _get_intent_or_404(db, intent_id)
    planned_date = data.planned_date if data else None
    try:
        intent = RefreshIntentService(db).schedule(intent, planned_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    result = RefreshIntentResponse.model_validate(intent)
    await notify(db, result.id, NotificationEvent.REFRESH_SCHEDULED)
    return result


@router.post(
    "/{intent_id}/start",
    response_model=RefreshIntentResponse,
    summary="Start refresh execution",
    responses={
        400: {"description": "Intent is not approved or scheduled"},
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Refresh intent not found"},
    },
)
async def start_refresh_intent(
    intent_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(require_role(*LEADS)),
) -> RefreshIntentResponse:
    intent = _get_intent_or_404(db, intent_id)
    try:
        intent = RefreshIntentService(db).start(intent)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    result = RefreshIntentResponse.model_validate(intent)
    await notify(db, result.id, NotificationEvent.REFRESH_STARTING)
    return result


@router.post(
    "/{intent_id}/complete",
    response_model=RefreshIntentResponse,
    summary="Complete refresh execution",
    responses={
        400: {"description": "Intent is not in progress"},
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Refresh intent not found"},
    },
)
async def complete_refresh_intent(
    intent_id: UUID,
    data: CompleteIntentRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_role(*LEADS)),
) -> RefreshIntentResponse:
    """Record the execution outcome. A FAILED outcome fails the intent."""
    intent = _get_intent_or_404(db, intent_id)
    try:
        intent, _ = RefreshIntentService(db).complete(intent, user.id, data)  # type: ignore[arg-type]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    result = RefreshIntentResponse.model_validate(intent)
    event = (
        NotificationEvent.REFRESH_FAILED
        if result.intent_status == IntentStatus.FAILED.value
        else NotificationEvent.REFRESH_COMPLETED
    )
    extra = {
        "duration_minutes": data.duration_minutes,
        "data_volume_gb": str(data.data_volume_gb) if data.data_volume_gb is not None else None,
        "error_message": data.error_message,
    }
    await notify(db, result.id, event, extra)
    return result


@router.post(
    "/{intent_id}/cancel",
    response_model=RefreshIntentResponse,
    summary="Cancel refresh intent",
    responses={
        400: {"description": "Intent can no longer be cancelled"},
        401: {"description": "Unauthorized"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Refresh intent not found"},
    },
)
async def cancel_refresh_intent(
    intent_id: UUID,
    data: CancelIntentRequest | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_role(*LEADS)),
) -> RefreshIntent:
    intent = _get_intent_or_404(db, intent_id)
    try:
        return RefreshIntentService(db).cancel(
            intent, data.cancellation_reason if data else None
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None


@router.get(
    "/{intent_id}/notification_logs",
    response_model=list[NotificationLogResponse],
    summary="List notification dispatches for an intent",
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "Refresh intent not found"},
    },
)
async def list_intent_notification_logs(
    intent_id: UUID,
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[NotificationLogResponse]:
    _get_intent_or_404(db, intent_id)
    repo = NotificationLogRepository(db)
    response.headers["X-Total-Count"] = str(repo.count(refresh_intent_id=intent_id))
    logs = repo.get_all(skip=skip, limit=limit, refresh_intent_id=intent_id)
    return [NotificationLogResponse.model_validate(log) for log in logs]
