"""Item status transitions.

Every status change an item can go through is listed once in ``TRANSITIONS``,
keyed by item type and operation. Services never compare statuses by hand;
they call ``check_transition`` or ``apply_transition`` and let the table
decide.
"""
import enum
import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import StatusConflictError
from app.models.event_log import EventType
from app.models.item import InventoryItem, ItemStatus, ItemType, REACHABLE_STATUSES

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    """Operations that move an item from one status to another."""
    SELL = "sell"
    VOID_SALE = "void_sale"
    BORROW = "borrow"
    RETURN_BORROWED = "return_borrowed"
    ASSIGN = "assign"
    RETURN_ASSIGNED = "return_assigned"
    RESERVE = "reserve"
    UNRESERVE = "unreserve"
    MARK_DEFECTIVE = "mark_defective"
    RESTORE = "restore"
    DECOMMISSION = "decommission"
    REINSTATE = "reinstate"
    REPAIR_INTAKE = "repair_intake"
    CUSTOMER_REPAIR_INTAKE = "customer_repair_intake"
    REPAIR_RETURN = "repair_return"


@dataclass(frozen=True)
class TransitionRule:
    """Allowed source statuses, target status and audit event of one operation.

    ``target`` is None when the new status depends on more than the
    operation (repair returns); the caller then passes it explicitly.
    """
    operation: Operation
    allowed: FrozenSet[ItemStatus]
    target: Optional[ItemStatus]
    event_type: EventType

    def allowed_names(self):
        return sorted(status.value for status in self.allowed)


def _rule(operation, allowed, target, event_type):
    return TransitionRule(operation, frozenset(allowed), target, event_type)


S = ItemStatus

TRANSITIONS = {
    # Sale-bound stock
    (ItemType.SALE, Operation.SELL): _rule(Operation.SELL, [S.IN_STOCK], S.SOLD, EventType.SALE),
    (ItemType.SALE, Operation.VOID_SALE): _rule(
        Operation.VOID_SALE, [S.SOLD, S.RETURNED_TO_CUSTOMER], S.IN_STOCK, EventType.VOID
    ),
    (ItemType.SALE, Operation.BORROW): _rule(Operation.BORROW, [S.IN_STOCK], S.BORROWED, EventType.BORROW),
    (ItemType.SALE, Operation.RETURN_BORROWED): _rule(
        Operation.RETURN_BORROWED, [S.BORROWED], S.IN_STOCK, EventType.RETURN
    ),
    (ItemType.SALE, Operation.RESERVE): _rule(Operation.RESERVE, [S.IN_STOCK], S.RESERVED, EventType.STATUS_CHANGE),
    (ItemType.SALE, Operation.UNRESERVE): _rule(
        Operation.UNRESERVE, [S.RESERVED], S.IN_STOCK, EventType.STATUS_CHANGE
    ),
    (ItemType.SALE, Operation.MARK_DEFECTIVE): _rule(
        Operation.MARK_DEFECTIVE, [S.IN_STOCK], S.DEFECTIVE, EventType.STATUS_CHANGE
    ),
    (ItemType.SALE, Operation.RESTORE): _rule(Operation.RESTORE, [S.DEFECTIVE], S.IN_STOCK, EventType.STATUS_CHANGE),
    (ItemType.SALE, Operation.DECOMMISSION): _rule(
        Operation.DECOMMISSION, [S.IN_STOCK, S.DEFECTIVE], S.DECOMMISSIONED, EventType.DECOMMISSION
    ),
    (ItemType.SALE, Operation.REINSTATE): _rule(
        Operation.REINSTATE, [S.DECOMMISSIONED], S.IN_STOCK, EventType.REINSTATE
    ),
    (ItemType.SALE, Operation.REPAIR_INTAKE): _rule(
        Operation.REPAIR_INTAKE, [S.IN_STOCK, S.DEFECTIVE], S.REPAIRING, EventType.REPAIR_SENT
    ),
    (ItemType.SALE, Operation.CUSTOMER_REPAIR_INTAKE): _rule(
        Operation.CUSTOMER_REPAIR_INTAKE, [S.SOLD, S.RETURNED_TO_CUSTOMER], S.REPAIRING, EventType.REPAIR_SENT
    ),
    (ItemType.SALE, Operation.REPAIR_RETURN): _rule(
        Operation.REPAIR_RETURN, [S.REPAIRING], None, EventType.REPAIR_RETURNED
    ),
    # Company assets
    (ItemType.ASSET, Operation.ASSIGN): _rule(Operation.ASSIGN, [S.IN_WAREHOUSE], S.ASSIGNED, EventType.ASSIGN),
    (ItemType.ASSET, Operation.RETURN_ASSIGNED): _rule(
        Operation.RETURN_ASSIGNED, [S.ASSIGNED], S.IN_WAREHOUSE, EventType.RETURN
    ),
    (ItemType.ASSET, Operation.MARK_DEFECTIVE): _rule(
        Operation.MARK_DEFECTIVE, [S.IN_WAREHOUSE], S.DEFECTIVE, EventType.STATUS_CHANGE
    ),
    (ItemType.ASSET, Operation.RESTORE): _rule(
        Operation.RESTORE, [S.DEFECTIVE], S.IN_WAREHOUSE, EventType.STATUS_CHANGE
    ),
    (ItemType.ASSET, Operation.DECOMMISSION): _rule(
        Operation.DECOMMISSION, [S.IN_WAREHOUSE], S.DECOMMISSIONED, EventType.DECOMMISSION
    ),
    (ItemType.ASSET, Operation.REINSTATE): _rule(
        Operation.REINSTATE, [S.DECOMMISSIONED], S.IN_WAREHOUSE, EventType.REINSTATE
    ),
    (ItemType.ASSET, Operation.REPAIR_INTAKE): _rule(
        Operation.REPAIR_INTAKE, [S.IN_WAREHOUSE, S.DEFECTIVE], S.REPAIRING, EventType.REPAIR_SENT
    ),
    (ItemType.ASSET, Operation.REPAIR_RETURN): _rule(
        Operation.REPAIR_RETURN, [S.REPAIRING], None, EventType.REPAIR_RETURNED
    ),
}


def get_rule(item_type: str, operation: Operation) -> Optional[TransitionRule]:
    return TRANSITIONS.get((ItemType(item_type), operation))


def check_transition(item: InventoryItem, operation: Operation) -> TransitionRule:
    """Return the rule for ``operation`` if the item's current status allows it.

    Raises StatusConflictError naming the allowed statuses otherwise.
    """
    rule = get_rule(item.item_type, operation)
    if rule is None:
        raise StatusConflictError(
            f"Item {item.id}: '{operation.value}' is not available for {item.item_type} items.",
            current_status=item.status,
            item_id=item.id,
        )

    if ItemStatus(item.status) not in rule.allowed:
        allowed = rule.allowed_names()
        logger.warning(
            f"Rejected '{operation.value}' on item {item.id}: status {item.status} not in {allowed}"
        )
        raise StatusConflictError(
            f"Item {item.id}: only items with status [{', '.join(allowed)}] "
            f"can perform '{operation.value}' (current status: {item.status}).",
            current_status=item.status,
            allowed=allowed,
            item_id=item.id,
        )
    return rule


def apply_transition(
    item: InventoryItem,
    operation: Operation,
    target: Optional[ItemStatus] = None,
) -> TransitionRule:
    """Guard the operation and move the item to its new status."""
    rule = check_transition(item, operation)
    new_status = target if target is not None else rule.target
    if new_status is None:
        raise ValueError(f"Operation '{operation.value}' needs an explicit target status")
    if new_status not in REACHABLE_STATUSES[ItemType(item.item_type)]:
        raise StatusConflictError(
            f"Item {item.id}: status {new_status.value} is not valid for {item.item_type} items.",
            current_status=item.status,
            item_id=item.id,
        )
    item.status = new_status.value
    return rule


def count_outstanding(db: Session, link_model, parent_column, parent_id: int) -> int:
    """Count join rows of one transaction whose item has not come back yet."""
    db.flush()
    return (
        db.query(func.count(link_model.id))
        .filter(parent_column == parent_id, link_model.returned_at.is_(None))
        .scalar()
    )


def derive_return_status(outstanding: int, complete_status, partial_status):
    """Parent transaction status from the number of items still out."""
    if outstanding < 0:
        raise ValueError("outstanding cannot be negative")
    return complete_status if outstanding == 0 else partial_status
