"""Shared record lookups for the services."""
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.exceptions import InvalidInputError, RecordNotFoundError
from app.models.item import InventoryItem, ItemType


def get_or_404(db: Session, model, record_id: int, label: str):
    """Fetch a row by primary key or raise RecordNotFoundError."""
    record = db.get(model, record_id)
    if record is None:
        raise RecordNotFoundError(f"{label} not found.")
    return record


def unique_ids(item_ids: Iterable[int], field: str = "inventory_item_ids") -> List[int]:
    """Deduplicate ids, keeping order. An empty list is rejected."""
    ids = list(dict.fromkeys(item_ids or []))
    if not ids:
        raise InvalidInputError(f"{field} must be a non-empty list of item ids.")
    return ids


def lock_items(
    db: Session,
    item_ids: Iterable[int],
    item_type: Optional[ItemType] = None,
) -> List[InventoryItem]:
    """Re-fetch items inside the current transaction, in the order requested.

    Rows are selected FOR UPDATE where the backend supports it. Every id must
    exist, and all items must be of ``item_type`` when one is given.
    """
    ids = unique_ids(item_ids)
    rows = (
        db.query(InventoryItem)
        .filter(InventoryItem.id.in_(ids))
        .with_for_update()
        .all()
    )
    by_id = {item.id: item for item in rows}

    missing = [item_id for item_id in ids if item_id not in by_id]
    if missing:
        raise RecordNotFoundError(
            f"Items not found: {', '.join(str(item_id) for item_id in missing)}."
        )

    if item_type is not None:
        wrong = [item_id for item_id in ids if by_id[item_id].item_type != item_type.value]
        if wrong:
            raise InvalidInputError(
                f"Items {', '.join(str(item_id) for item_id in wrong)} are not {item_type.value} items."
            )

    return [by_id[item_id] for item_id in ids]
