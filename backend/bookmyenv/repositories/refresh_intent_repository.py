"""Repository for RefreshIntent data access."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Query, Session

from bookmyenv.core.sorting import apply_order_by
from bookmyenv.models.refresh_intent import IntentStatus, RefreshIntent


class RefreshIntentRepository:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(
        self,
        status: str | None = None,
        entity_type: str | None = None,
        entity_id: UUID | None = None,
        pending_approval: bool = False,
    ) -> Query:  # type: ignore[type-arg]
        query = self.db.query(RefreshIntent)
        if pending_approval:
            query = query.filter(RefreshIntent.intent_status == IntentStatus.REQUESTED.value)
        elif status is not None:
            query = query.filter(RefreshIntent.intent_status == status)
        if entity_type is not None:
            query = query.filter(RefreshIntent.entity_type == entity_type)
        if entity_id is not None:
            query = query.filter(RefreshIntent.entity_id == entity_id)
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        status: str | None = None,
        entity_type: str | None = None,
        entity_id: UUID | None = None,
        pending_approval: bool = False,
        order_by: str | None = None,
    ) -> list[RefreshIntent]:
        query = self._filtered(status, entity_type, entity_id, pending_approval)
        query = apply_order_by(
            query, RefreshIntent, order_by, default_field="planned_date", default_direction="asc"
        )
        return query.offset(skip).limit(limit).all()

    def count(
        self,
        status: str | None = None,
        entity_type: str | None = None,
        entity_id: UUID | None = None,
        pending_approval: bool = False,
    ) -> int:
        return self._filtered(status, entity_type, entity_id, pending_approval).count()

    def get_by_id(self, intent_id: UUID) -> RefreshIntent | None:
        return self.db.query(RefreshIntent).filter(RefreshIntent.id == intent_id).first()

    def create(self, **fields: Any) -> RefreshIntent:
        intent = RefreshIntent(**fields)
        self.db.add(intent)
        self.db.commit()
        self.db.refresh(intent)
        return intent

    def update(self, intent: RefreshIntent, **fields: Any) -> RefreshIntent:
        for key, value in fields.items():
            setattr(intent, key, value)
        self.db.commit()
        self.db.refresh(intent)
        return intent

    def get_planned_between(
        self,
        start: datetime,
        end: datetime,
        statuses: Iterable[str],
    ) -> list[RefreshIntent]:
        """Intents in one of ``statuses`` planned within [start, end]."""
        return (
            self.db.query(RefreshIntent)
            .filter(
                RefreshIntent.intent_status.in_(list(statuses)),
                RefreshIntent.planned_date >= start,
                RefreshIntent.planned_date <= end,
            )
            .order_by(RefreshIntent.planned_date)
            .all()
        )

    def claim_reminder_mark(self, intent: RefreshIntent, mark: str) -> bool:
        """Append ``mark`` to the intent's sent-reminder set if nobody else has.

        The write is a single UPDATE conditioned on the version read with the
        intent, so of two concurrent claimers only one sees a row updated.
        Returns True when this caller won the claim.
        """
        sent = list(intent.notification_sent_dates or [])
        if mark in sent:
            return False
        version = int(intent.reminder_version or 0)
        updated = (
            self.db.query(RefreshIntent)
            .filter(
                RefreshIntent.id == intent.id,
                RefreshIntent.reminder_version == version,
            )
            .update(
                {
                    RefreshIntent.notification_sent_dates: [*sent, mark],
                    RefreshIntent.reminder_version: version + 1,
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        return updated == 1
