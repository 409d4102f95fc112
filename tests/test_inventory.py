"""Inventory items and assets: registration, edits, deletion, status actions and history."""
import pytest

from app.exceptions import InvalidInputError, RecordInUseError, RecordNotFoundError, StatusConflictError
from app.models.event_log import EventLog, EventType
from app.models.item import InventoryItem, ItemStatus, ItemType
from app.schemas.item import AssetCreate, AssetUpdate, ItemBatchCreate, ItemBatchEntry, ItemCreate, ItemUpdate
from app.services.inventory import InventoryService
from app.services.sales import SaleService
from app.services.transitions import Operation


def test_new_item_is_in_stock_with_create_event(db, make_item):
    item = make_item()
    assert item.status == ItemStatus.IN_STOCK.value
    assert item.item_type == ItemType.SALE.value

    events = db.query(EventLog).filter(EventLog.inventory_item_id == item.id).all()
    assert [e.event_type for e in events] == [EventType.CREATE.value]


def test_category_requires_serial_number(db, admin, catalogue):
    data = ItemCreate(product_model_id=catalogue["product_model"].id, supplier_id=catalogue["supplier"].id)
    with pytest.raises(InvalidInputError):
        InventoryService(db).add_item(data, admin)


def test_category_requires_mac_address(db, admin, catalogue, make_item):
    catalogue["category"].requires_mac_address = True
    db.commit()

    with pytest.raises(InvalidInputError):
        make_item()
    item = make_item(mac_address="aa:bb:cc:dd:ee:ff")
    assert item.mac_address == "aa:bb:cc:dd:ee:ff"


def test_invalid_mac_address_is_rejected(make_item):
    with pytest.raises(InvalidInputError) as exc_info:
        make_item(mac_address="not-a-mac")
    assert "MAC" in exc_info.value.message


def test_duplicate_serial_number_is_rejected(make_item):
    make_item(serial_number="DUP-1")
    with pytest.raises(InvalidInputError) as exc_info:
        make_item(serial_number="DUP-1")
    assert "must be unique" in exc_info.value.message


def test_batch_is_all_or_nothing(db, admin, catalogue):
    data = ItemBatchCreate(
        product_model_id=catalogue["product_model"].id,
        supplier_id=catalogue["supplier"].id,
        items=[
            ItemBatchEntry(serial_number="B-1"),
            ItemBatchEntry(serial_number="B-2", mac_address="bad"),
        ],
    )
    with pytest.raises(InvalidInputError):
        InventoryService(db).add_items_batch(data, admin)
    assert db.query(InventoryItem).count() == 0

    data.items[1] = ItemBatchEntry(serial_number="B-2")
    created = InventoryService(db).add_items_batch(data, admin)
    assert [item.serial_number for item in created] == ["B-1", "B-2"]


def test_asset_requires_asset_code(db, admin, catalogue):
    data = AssetCreate(asset_code="  ", product_model_id=catalogue["product_model"].id, serial_number="X-1")
    with pytest.raises(InvalidInputError):
        InventoryService(db).add_asset(data, admin)


def test_new_asset_is_in_warehouse(make_asset):
    asset = make_asset()
    assert asset.status == ItemStatus.IN_WAREHOUSE.value
    assert asset.item_type == ItemType.ASSET.value


def test_update_item_logs_event_and_keeps_status(db, admin, make_item):
    item = make_item()
    updated = InventoryService(db).update_item(item.id, ItemUpdate(notes="Scratched box"), admin, ItemType.SALE)
    assert updated.notes == "Scratched box"
    assert updated.status == ItemStatus.IN_STOCK.value
    assert db.query(EventLog).filter(EventLog.event_type == EventType.UPDATE.value).count() == 1


def test_asset_lookup_does_not_return_sale_items(db, admin, make_item):
    item = make_item()
    with pytest.raises(RecordNotFoundError):
        InventoryService(db).update_item(item.id, AssetUpdate(notes="x"), admin, ItemType.ASSET)


def test_delete_item_without_history(db, make_item):
    item = make_item()
    InventoryService(db).delete_item(item.id, ItemType.SALE)
    assert db.get(InventoryItem, item.id) is None
    assert db.query(EventLog).count() == 0


def test_delete_item_with_history_is_rejected(db, admin, catalogue, make_item):
    item = make_item()
    SaleService(db).create_sale(catalogue["customer"].id, [item.id], admin)

    with pytest.raises(RecordInUseError) as exc_info:
        InventoryService(db).delete_item(item.id, ItemType.SALE)
    assert "decommissioned" in exc_info.value.message


@pytest.mark.parametrize("operation,expected", [
    (Operation.RESERVE, ItemStatus.RESERVED),
    (Operation.MARK_DEFECTIVE, ItemStatus.DEFECTIVE),
    (Operation.DECOMMISSION, ItemStatus.DECOMMISSIONED),
])
def test_direct_status_actions(db, admin, make_item, operation, expected):
    item = make_item()
    item = InventoryService(db).change_status(item.id, operation, admin, ItemType.SALE)
    assert item.status == expected.value


def test_decommission_then_reinstate(db, admin, make_asset):
    asset = make_asset()
    service = InventoryService(db)
    service.change_status(asset.id, Operation.DECOMMISSION, admin, ItemType.ASSET)
    asset = service.change_status(asset.id, Operation.REINSTATE, admin, ItemType.ASSET)
    assert asset.status == ItemStatus.IN_WAREHOUSE.value


def test_status_action_from_wrong_status_fails(db, admin, make_item):
    item = make_item()
    with pytest.raises(StatusConflictError):
        InventoryService(db).change_status(item.id, Operation.UNRESERVE, admin, ItemType.SALE)


def test_history_lists_newest_first(db, admin, make_item):
    item = make_item()
    service = InventoryService(db)
    service.change_status(item.id, Operation.RESERVE, admin, ItemType.SALE)
    service.change_status(item.id, Operation.UNRESERVE, admin, ItemType.SALE)

    found, events = service.get_history(item.id)
    assert found.id == item.id
    assert [e.event_type for e in events] == [
        EventType.STATUS_CHANGE.value,
        EventType.STATUS_CHANGE.value,
        EventType.CREATE.value,
    ]
    assert events[0].details["to_status"] == ItemStatus.IN_STOCK.value
