"""Subject/body templates for refresh notification events.

Building content is pure: it only reads the intent and the ``extra`` mapping
passed by whoever raised the event.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo

from bookmyenv.core.config import settings
from bookmyenv.models.refresh_notification import NotificationEvent
from bookmyenv.models.shared import ensure_utc

if TYPE_CHECKING:
    from datetime import datetime

    from bookmyenv.models.refresh_intent import RefreshIntent

DISPLAY_DATE_FORMAT = "%Y-%m-%d %H:%M %Z"


@dataclass(frozen=True)
class NotificationContent:
    subject: str
    body: str


@dataclass(frozen=True)
class _TemplateContext:
    intent: RefreshIntent
    label: str
    planned: str
    extra: Mapping[str, Any]

    def extra_or(self, key: str, fallback: str) -> Any:
        return self.extra.get(key) or fallback

    @property
    def source(self) -> str:
        return self.intent.source_environment_name or "N/A"

    @property
    def downtime(self) -> str:
        if self.intent.requires_downtime:
            return f"Yes ({self.intent.estimated_downtime_minutes} min)"
        return "No"

    @property
    def requester(self) -> str:
        user = self.intent.requested_by
        return (user.username if user is not None else None) or "Unknown"


def event_key(event_type: NotificationEvent | str) -> str:
    """Plain string value of an event type, enum member or not."""
    return str(getattr(event_type, "value", event_type))


def entity_label(intent: RefreshIntent) -> str:
    return f"{intent.entity_type}: {intent.entity_name or intent.entity_id}"


def format_planned_date(value: datetime | None) -> str:
    if value is None:
        return "N/A"
    local = ensure_utc(value).astimezone(ZoneInfo(settings.DISPLAY_TIMEZONE))
    return local.strftime(DISPLAY_DATE_FORMAT)


def _requested(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[Refresh Request] {ctx.label} - Approval Required",
        body=(
            f"A refresh has been requested for {ctx.label}.\n\n"
            f"Type: {ctx.intent.refresh_type}\n"
            f"Planned Date: {ctx.planned}\n"
            f"Source: {ctx.source}\n"
            f"Reason: {ctx.intent.reason}\n\n"
            f"Requested by: {ctx.requester}"
        ),
    )


def _approved(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[Refresh Approved] {ctx.label}",
        body=(
            f"The refresh request for {ctx.label} has been approved.\n\n"
            f"Type: {ctx.intent.refresh_type}\n"
            f"Planned Date: {ctx.planned}\n"
            f"Approval Notes: {ctx.extra_or('approval_notes', 'None')}"
        ),
    )


def _rejected(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[Refresh Rejected] {ctx.label}",
        body=(
            f"The refresh request for {ctx.label} has been rejected.\n\n"
            f"Reason: {ctx.extra_or('rejection_reason', 'Not specified')}"
        ),
    )


def _scheduled(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[Refresh Scheduled] {ctx.label}",
        body=(
            f"A refresh has been scheduled for {ctx.label}.\n\n"
            f"Type: {ctx.intent.refresh_type}\n"
            f"Scheduled Date: {ctx.planned}\n"
            f"Source: {ctx.source}\n"
            f"Downtime Expected: {ctx.downtime}"
        ),
    )


def _reminder_7day(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[Reminder] Refresh in 7 days - {ctx.label}",
        body=(
            f"Reminder: A refresh is scheduled in 7 days for {ctx.label}.\n\n"
            f"Scheduled Date: {ctx.planned}\n"
            f"Type: {ctx.intent.refresh_type}"
        ),
    )


def _reminder_1day(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[Reminder] Refresh Tomorrow - {ctx.label}",
        body=(
            f"Reminder: A refresh is scheduled for tomorrow for {ctx.label}.\n\n"
            f"Scheduled Date: {ctx.planned}\n"
            f"Type: {ctx.intent.refresh_type}\n"
            f"Downtime Expected: {ctx.downtime}"
        ),
    )


def _reminder_1hr(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[URGENT] Refresh in 1 hour - {ctx.label}",
        body=(
            f"URGENT: A refresh will begin in approximately 1 hour for {ctx.label}.\n\n"
            f"Scheduled Date: {ctx.planned}\n"
            f"Type: {ctx.intent.refresh_type}"
        ),
    )


def _starting(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[Starting] Refresh Beginning - {ctx.label}",
        body=(
            f"The refresh for {ctx.label} is now starting.\n\n"
            f"Type: {ctx.intent.refresh_type}\n"
            f"Source: {ctx.source}"
        ),
    )


def _completed(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[Completed] Refresh Successful - {ctx.label}",
        body=(
            f"The refresh for {ctx.label} has completed successfully.\n\n"
            f"Duration: {ctx.extra_or('duration_minutes', 'N/A')} minutes\n"
            f"Data Volume: {ctx.extra_or('data_volume_gb', 'N/A')} GB"
        ),
    )


def _failed(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[FAILED] Refresh Failed - {ctx.label}",
        body=(
            f"The refresh for {ctx.label} has FAILED.\n\n"
            f"Error: {ctx.extra_or('error_message', 'Unknown error')}\n\n"
            "Please investigate and take appropriate action."
        ),
    )


def _conflict_detected(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[Conflict] Booking Conflict Detected - {ctx.label}",
        body=(
            "A conflict has been detected between a refresh and an existing booking.\n\n"
            f"Refresh: {ctx.label}\n"
            f"Planned Date: {ctx.planned}\n"
            f"Booking Owner: {ctx.extra_or('booking_owner', 'Unknown')}\n\n"
            "Please resolve this conflict before the refresh can proceed."
        ),
    )


def _conflict_resolved(ctx: _TemplateContext) -> NotificationContent:
    return NotificationContent(
        subject=f"[Resolved] Conflict Resolved - {ctx.label}",
        body=(
            f"The booking conflict for the refresh of {ctx.label} has been resolved.\n\n"
            f"Resolution: {ctx.extra_or('resolution', 'Unknown')}"
        ),
    )


TEMPLATES: dict[NotificationEvent, Callable[[_TemplateContext], NotificationContent]] = {
    NotificationEvent.REFRESH_REQUESTED: _requested,
    NotificationEvent.REFRESH_APPROVED: _approved,
    NotificationEvent.REFRESH_REJECTED: _rejected,
    NotificationEvent.REFRESH_SCHEDULED: _scheduled,
    NotificationEvent.REFRESH_REMINDER_7DAY: _reminder_7day,
    NotificationEvent.REFRESH_REMINDER_1DAY: _reminder_1day,
    NotificationEvent.REFRESH_REMINDER_1HR: _reminder_1hr,
    NotificationEvent.REFRESH_STARTING: _starting,
    NotificationEvent.REFRESH_COMPLETED: _completed,
    NotificationEvent.REFRESH_FAILED: _failed,
    NotificationEvent.CONFLICT_DETECTED: _conflict_detected,
    NotificationEvent.CONFLICT_RESOLVED: _conflict_resolved,
}


def build_notification_content(
    intent: RefreshIntent,
    event_type: NotificationEvent | str,
    extra: Mapping[str, Any] | None = None,
) -> NotificationContent:
    """Render the subject and body for ``event_type``.

    Unknown event types get a generic message that names the raw event type,
    so new events can be raised before a template exists for them.
    """
    key = event_key(event_type)
    ctx = _TemplateContext(
        intent=intent,
        label=entity_label(intent),
        planned=format_planned_date(intent.planned_date),
        extra=extra or {},
    )

    try:
        template = TEMPLATES[NotificationEvent(key)]
    except ValueError:
        return NotificationContent(
            subject=f"[Refresh] {key} - {ctx.label}",
            body=f"Event: {key}\nEntity: {ctx.label}\nPlanned Date: {ctx.planned}",
        )
    return template(ctx)
