"""Repository for RefreshHistory data access."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Query, Session

from bookmyenv.models.refresh_history import RefreshHistory


class RefreshHistoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, *, commit: bool = True, **fields: Any) -> RefreshHistory:
        history = RefreshHistory(**fields)
        self.db.add(history)
        if commit:
            self.db.commit()
            self.db.refresh(history)
        else:
            self.db.flush()
        return history

    def _filtered(
        self,
        entity_type: str | None = None,
        entity_id: UUID | None = None,
        execution_status: str | None = None,
    ) -> Query:  # type: ignore[type-arg]
        query = self.db.query(RefreshHistory)
        if entity_type is not None:
            query = query.filter(RefreshHistory.entity_type == entity_type)
        if entity_id is not None:
            query = query.filter(RefreshHistory.entity_id == entity_id)
        if execution_status is not None:
            query = query.filter(RefreshHistory.execution_status == execution_status)
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        entity_type: str | None = None,
        entity_id: UUID | None = None,
        execution_status: str | None = None,
    ) -> list[RefreshHistory]:
        return (
            self._filtered(entity_type, entity_id, execution_status)
            .order_by(RefreshHistory.refresh_date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(
        self,
        entity_type: str | None = None,
        entity_id: UUID | None = None,
        execution_status: str | None = None,
    ) -> int:
        return self._filtered(entity_type, entity_id, execution_status).count()
