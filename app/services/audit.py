"""Audit trail helpers."""
from typing import Optional

from sqlalchemy.orm import Session

from app.models.event_log import EventLog, EventType


def log_event(
    db: Session,
    item_id: int,
    user_id: Optional[int],
    event_type: EventType,
    details: str,
    **extra
) -> EventLog:
    """Append an event to an item's history.

    The row joins the caller's transaction, so it is only persisted if the
    operation that produced it commits.
    """
    payload = {"details": details}
    payload.update(extra)
    event = EventLog(
        inventory_item_id=item_id,
        user_id=user_id,
        event_type=event_type.value,
        details=payload,
    )
    db.add(event)
    return event
