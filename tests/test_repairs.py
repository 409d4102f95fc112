"""Repair orders and the status an item takes when it comes back."""
import pytest

from app.exceptions import InvalidInputError, RecordNotFoundError, StatusConflictError
from app.models.event_log import EventLog, EventType
from app.models.item import InventoryItem, ItemOwner, ItemStatus, ItemType
from app.models.repair import Repair, RepairOutcome, RepairStatus
from app.models.sale import Sale, SaleStatus
from app.schemas.repair import RepairItemCreate, RepairItemReturn
from app.services.repairs import RepairService, resolve_repair_return_status
from app.services.sales import SaleService


def _send(db, actor, addresses, entries, **kwargs):
    sender, receiver = addresses
    return RepairService(db).create_repair(
        sender.id, receiver.id, [RepairItemCreate(**entry) for entry in entries], actor, **kwargs
    )


def _return(db, actor, repair, outcomes):
    returns = [
        RepairItemReturn(inventory_item_id=item_id, repair_outcome=outcome)
        for item_id, outcome in outcomes
    ]
    return RepairService(db).return_items(repair.id, returns, actor)


@pytest.mark.parametrize("outcome", list(RepairOutcome))
def test_customer_owned_item_always_goes_back_to_customer(outcome):
    item = InventoryItem(
        item_type=ItemType.SALE.value,
        owner_type=ItemOwner.CUSTOMER.value,
        status=ItemStatus.REPAIRING.value,
    )
    assert resolve_repair_return_status(item, outcome) == ItemStatus.RETURNED_TO_CUSTOMER


@pytest.mark.parametrize("outcome", list(RepairOutcome))
def test_item_of_completed_sale_goes_back_to_customer(outcome):
    item = InventoryItem(
        item_type=ItemType.SALE.value,
        owner_type=ItemOwner.COMPANY.value,
        status=ItemStatus.REPAIRING.value,
    )
    item.sale = Sale(status=SaleStatus.COMPLETED.value)
    assert resolve_repair_return_status(item, outcome) == ItemStatus.RETURNED_TO_CUSTOMER


def test_company_item_outcomes():
    stock = InventoryItem(item_type=ItemType.SALE.value, owner_type="COMPANY", status="REPAIRING")
    asset = InventoryItem(item_type=ItemType.ASSET.value, owner_type="COMPANY", status="REPAIRING")

    assert resolve_repair_return_status(stock, RepairOutcome.REPAIRED_SUCCESSFULLY) == ItemStatus.IN_STOCK
    assert resolve_repair_return_status(stock, RepairOutcome.UNREPAIRABLE) == ItemStatus.DECOMMISSIONED
    assert resolve_repair_return_status(asset, RepairOutcome.REPAIRED_SUCCESSFULLY) == ItemStatus.IN_WAREHOUSE
    assert resolve_repair_return_status(asset, RepairOutcome.UNREPAIRABLE) == ItemStatus.DECOMMISSIONED


def test_company_stock_repaired_then_unrepairable(db, admin, addresses, make_item):
    fixed, broken = make_item(), make_item()
    repair = _send(db, admin, addresses, [{"id": fixed.id}, {"id": broken.id}])
    assert repair.status == RepairStatus.REPAIRING.value
    assert fixed.status == ItemStatus.REPAIRING.value

    repair = _return(db, admin, repair, [(fixed.id, RepairOutcome.REPAIRED_SUCCESSFULLY)])
    assert repair.status == RepairStatus.PARTIALLY_RETURNED.value
    assert fixed.status == ItemStatus.IN_STOCK.value

    repair = _return(db, admin, repair, [(broken.id, RepairOutcome.UNREPAIRABLE)])
    assert repair.status == RepairStatus.COMPLETED.value
    assert broken.status == ItemStatus.DECOMMISSIONED.value
    outcomes = {link.inventory_item_id: link.repair_outcome for link in repair.items}
    assert outcomes == {
        fixed.id: RepairOutcome.REPAIRED_SUCCESSFULLY.value,
        broken.id: RepairOutcome.UNREPAIRABLE.value,
    }


def test_repaired_asset_returns_to_warehouse(db, admin, addresses, make_asset):
    asset = make_asset()
    repair = _send(db, admin, addresses, [{"id": asset.id}])
    _return(db, admin, repair, [(asset.id, RepairOutcome.REPAIRED_SUCCESSFULLY)])
    assert asset.status == ItemStatus.IN_WAREHOUSE.value


def test_new_customer_unit_is_registered_and_returned(db, admin, addresses, catalogue):
    repair = _send(
        db, admin, addresses,
        [{
            "is_customer_item": True,
            "product_model_id": catalogue["product_model"].id,
            "serial_number": "CUST-77",
        }],
        customer_id=catalogue["customer"].id,
    )
    item = db.query(InventoryItem).filter(InventoryItem.serial_number == "CUST-77").one()
    assert item.owner_type == ItemOwner.CUSTOMER.value
    assert item.status == ItemStatus.REPAIRING.value

    repair = _return(db, admin, repair, [(item.id, RepairOutcome.REPAIRED_SUCCESSFULLY)])
    assert item.status == ItemStatus.RETURNED_TO_CUSTOMER.value
    assert repair.status == RepairStatus.COMPLETED.value


def test_sold_item_comes_back_to_customer_even_if_unrepairable(db, admin, addresses, catalogue, make_item):
    item = make_item()
    SaleService(db).create_sale(catalogue["customer"].id, [item.id], admin)

    repair = _send(db, admin, addresses, [{"id": item.id, "is_customer_item": True}])
    assert item.status == ItemStatus.REPAIRING.value

    _return(db, admin, repair, [(item.id, RepairOutcome.UNREPAIRABLE)])
    assert item.status == ItemStatus.RETURNED_TO_CUSTOMER.value


def test_sold_item_needs_customer_intake(db, admin, addresses, catalogue, make_item):
    item = make_item()
    SaleService(db).create_sale(catalogue["customer"].id, [item.id], admin)

    with pytest.raises(StatusConflictError):
        _send(db, admin, addresses, [{"id": item.id}])
    db.refresh(item)
    assert item.status == ItemStatus.SOLD.value


def test_repair_entry_validation(db, admin, addresses):
    with pytest.raises(InvalidInputError):
        _send(db, admin, addresses, [])
    with pytest.raises(InvalidInputError):
        _send(db, admin, addresses, [{"is_customer_item": False}])
    with pytest.raises(InvalidInputError):
        _send(db, admin, addresses, [{"is_customer_item": True}])


def test_completed_repair_rejects_returns(db, admin, addresses, make_item):
    item = make_item()
    repair = _send(db, admin, addresses, [{"id": item.id}])
    _return(db, admin, repair, [(item.id, RepairOutcome.REPAIRED_SUCCESSFULLY)])

    with pytest.raises(StatusConflictError):
        _return(db, admin, repair, [(item.id, RepairOutcome.REPAIRED_SUCCESSFULLY)])


def test_failed_repair_order_leaves_no_trace(db, admin, addresses, make_item):
    item = make_item()

    with pytest.raises(RecordNotFoundError):
        _send(
            db, admin, addresses,
            [
                {"id": item.id},
                {"is_customer_item": True, "product_model_id": 9999, "serial_number": "CUST-404"},
            ],
        )

    db.refresh(item)
    assert item.status == ItemStatus.IN_STOCK.value
    assert db.query(Repair).count() == 0
    assert db.query(EventLog).filter(EventLog.event_type == EventType.REPAIR_SENT.value).count() == 0
    created = db.query(EventLog).filter(EventLog.event_type == EventType.CREATE.value).all()
    assert [event.inventory_item_id for event in created] == [item.id]
    customer_items = db.query(InventoryItem).filter(InventoryItem.owner_type == ItemOwner.CUSTOMER.value)
    assert customer_items.count() == 0
