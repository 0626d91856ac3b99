"""Refresh history API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from bookmyenv.core.auth import get_current_user
from bookmyenv.core.database import get_db
from bookmyenv.models.refresh_history import RefreshHistory
from bookmyenv.models.user import User
from bookmyenv.repositories.refresh_history_repository import RefreshHistoryRepository
from bookmyenv.schemas.refresh_history import RefreshHistoryResponse

router = APIRouter()


@router.get(
    "/",
    response_model=list[RefreshHistoryResponse],
    summary="List refresh history",
    responses={401: {"description": "Unauthorized"}},
)
async def list_refresh_history(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    entity_type: str | None = Query(default=None),
    entity_id: UUID | None = Query(default=None),
    execution_status: str | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[RefreshHistory]:
    """List finished refresh executions, most recent first."""
    repo = RefreshHistoryRepository(db)
    response.headers["X-Total-Count"] = str(
        repo.count(entity_type, entity_id, execution_status)
    )
    return repo.get_all(
        skip=skip,
        limit=limit,
        entity_type=entity_type,
        entity_id=entity_id,
        execution_status=execution_status,
    )
