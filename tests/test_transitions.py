"""Transition table and guard behaviour."""
import pytest

from app.exceptions import StatusConflictError
from app.models.event_log import EventType
from app.models.item import InventoryItem, ItemStatus, ItemType, REACHABLE_STATUSES
from app.models.borrowing import BorrowingStatus
from app.services.transitions import (
    TRANSITIONS,
    Operation,
    apply_transition,
    check_transition,
    derive_return_status,
)


def _item(item_type=ItemType.SALE, status=ItemStatus.IN_STOCK):
    return InventoryItem(item_type=item_type.value, owner_type="COMPANY", status=status.value)


def test_every_rule_stays_within_reachable_statuses():
    for (item_type, operation), rule in TRANSITIONS.items():
        reachable = REACHABLE_STATUSES[item_type]
        assert rule.allowed <= reachable, operation
        if rule.target is not None:
            assert rule.target in reachable, operation


def test_sell_moves_in_stock_item_to_sold():
    item = _item()
    rule = apply_transition(item, Operation.SELL)
    assert item.status == ItemStatus.SOLD.value
    assert rule.event_type == EventType.SALE


def test_rejection_names_allowed_statuses():
    item = _item(status=ItemStatus.SOLD)
    with pytest.raises(StatusConflictError) as exc_info:
        check_transition(item, Operation.BORROW)
    assert "IN_STOCK" in exc_info.value.message
    assert exc_info.value.allowed == ["IN_STOCK"]
    assert exc_info.value.current_status == "SOLD"
    assert item.status == ItemStatus.SOLD.value


def test_operation_not_available_for_item_type():
    asset = _item(ItemType.ASSET, ItemStatus.IN_WAREHOUSE)
    with pytest.raises(StatusConflictError):
        check_transition(asset, Operation.SELL)

    stock = _item()
    with pytest.raises(StatusConflictError):
        check_transition(stock, Operation.ASSIGN)


def test_decommission_accepts_defective_sale_item():
    item = _item(status=ItemStatus.DEFECTIVE)
    apply_transition(item, Operation.DECOMMISSION)
    assert item.status == ItemStatus.DECOMMISSIONED.value


def test_repair_return_needs_explicit_target():
    item = _item(status=ItemStatus.REPAIRING)
    with pytest.raises(ValueError):
        apply_transition(item, Operation.REPAIR_RETURN)
    apply_transition(item, Operation.REPAIR_RETURN, target=ItemStatus.IN_STOCK)
    assert item.status == ItemStatus.IN_STOCK.value


def test_target_outside_item_type_is_rejected():
    asset = _item(ItemType.ASSET, ItemStatus.REPAIRING)
    with pytest.raises(StatusConflictError):
        apply_transition(asset, Operation.REPAIR_RETURN, target=ItemStatus.IN_STOCK)


def test_model_refuses_unreachable_status():
    asset = _item(ItemType.ASSET, ItemStatus.IN_WAREHOUSE)
    with pytest.raises(ValueError):
        asset.status = ItemStatus.SOLD.value


@pytest.mark.parametrize("outstanding,expected", [
    (0, BorrowingStatus.RETURNED),
    (1, BorrowingStatus.PARTIALLY_RETURNED),
    (7, BorrowingStatus.PARTIALLY_RETURNED),
])
def test_derive_return_status(outstanding, expected):
    status = derive_return_status(outstanding, BorrowingStatus.RETURNED, BorrowingStatus.PARTIALLY_RETURNED)
    assert status == expected


def test_derive_return_status_rejects_negative_count():
    with pytest.raises(ValueError):
        derive_return_status(-1, BorrowingStatus.RETURNED, BorrowingStatus.PARTIALLY_RETURNED)
