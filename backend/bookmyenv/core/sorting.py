"""Shared ``order_by`` handling for list endpoints."""

from __future__ import annotations

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from bookmyenv.core.database import Base


def apply_order_by(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    order_by: str | None,
    default_field: str = "created_at",
    default_direction: str = "desc",
) -> Query:  # type: ignore[type-arg]
    """Order a query by a ``"field:direction"`` string such as ``"planned_date:asc"``.

    Unknown columns fall back to ``default_field``; unknown directions fall
    back to ``default_direction``.
    """
    field, direction = default_field, default_direction

    if order_by:
        name, _, requested = order_by.partition(":")
        if name in model.__table__.columns:
            field = name
            direction = requested if requested in ("asc", "desc") else default_direction

    column = getattr(model, field)
    return query.order_by(asc(column) if direction == "asc" else desc(column))
