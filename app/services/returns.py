"""Returning items that went out with a borrowing, assignment or repair order."""
from datetime import datetime, timezone
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session

from app.exceptions import InvalidInputError, StatusConflictError
from app.models.user import User
from app.services.audit import log_event
from app.services.lookup import lock_items, unique_ids
from app.services.transitions import Operation, apply_transition, check_transition, count_outstanding


def select_open_links(parent, item_ids: List[int]) -> Dict[int, object]:
    """Map each requested item id to the parent's join row for it.

    Every id must belong to the parent and must not have been returned yet.
    """
    links = {link.inventory_item_id: link for link in parent.items}

    foreign = [item_id for item_id in item_ids if item_id not in links]
    if foreign:
        raise InvalidInputError(
            f"Items {', '.join(str(i) for i in foreign)} are not part of this record."
        )
    returned = [item_id for item_id in item_ids if links[item_id].returned_at is not None]
    if returned:
        raise StatusConflictError(
            f"Items {', '.join(str(i) for i in returned)} have already been returned."
        )
    return {item_id: links[item_id] for item_id in item_ids}


def close_links(
    db: Session,
    parent,
    link_model,
    parent_column,
    item_ids: List[int],
    operation: Operation,
    actor: User,
    details: str,
    **extra
) -> Tuple[int, datetime]:
    """Stamp ``returned_at`` on the parent's join rows for ``item_ids``.

    Each item goes back through ``operation`` and gets an audit entry.
    Returns the number of items still out and the return timestamp. Must
    run inside the caller's transaction.
    """
    ids = unique_ids(item_ids, "item_ids")
    links = select_open_links(parent, ids)

    items = lock_items(db, ids)
    for item in items:
        check_transition(item, operation)

    now = datetime.now(timezone.utc)
    for item in items:
        links[item.id].returned_at = now
        rule = apply_transition(item, operation)
        log_event(db, item.id, actor.id, rule.event_type, details, **extra)

    return count_outstanding(db, link_model, parent_column, parent.id), now
