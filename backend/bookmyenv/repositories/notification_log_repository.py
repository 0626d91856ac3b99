"""Repository for the append-only refresh notification log."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Query, Session

from bookmyenv.models.refresh_notification import RefreshNotificationLog


class NotificationLogRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        refresh_intent_id: UUID,
        event_type: str,
        channel: str,
        recipient_type: str,
        status: str,
        subject: str | None = None,
        message_body: str | None = None,
        recipient_id: UUID | None = None,
        recipient_email: str | None = None,
        recipient_webhook_url: str | None = None,
        error_message: str | None = None,
    ) -> RefreshNotificationLog:
        entry = RefreshNotificationLog(
            refresh_intent_id=refresh_intent_id,
            event_type=event_type,
            channel=channel,
            recipient_type=recipient_type,
            recipient_id=recipient_id,
            recipient_email=recipient_email,
            recipient_webhook_url=recipient_webhook_url,
            status=status,
            subject=subject,
            message_body=message_body,
            error_message=error_message,
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def _filtered(
        self,
        refresh_intent_id: UUID | None = None,
        event_type: str | None = None,
        channel: str | None = None,
        status: str | None = None,
    ) -> Query:  # type: ignore[type-arg]
        query = self.db.query(RefreshNotificationLog)
        if refresh_intent_id is not None:
            query = query.filter(RefreshNotificationLog.refresh_intent_id == refresh_intent_id)
        if event_type is not None:
            query = query.filter(RefreshNotificationLog.event_type == event_type)
        if channel is not None:
            query = query.filter(RefreshNotificationLog.channel == channel)
        if status is not None:
            query = query.filter(RefreshNotificationLog.status == status)
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        refresh_intent_id: UUID | None = None,
        event_type: str | None = None,
        channel: str | None = None,
        status: str | None = None,
    ) -> list[RefreshNotificationLog]:
        return (
            self._filtered(refresh_intent_id, event_type, channel, status)
            .order_by(RefreshNotificationLog.sent_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(
        self,
        refresh_intent_id: UUID | None = None,
        event_type: str | None = None,
        channel: str | None = None,
        status: str | None = None,
    ) -> int:
        return self._filtered(refresh_intent_id, event_type, channel, status).count()
