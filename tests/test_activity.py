"""Customer timelines and per-employee asset views."""
import pytest

from app.exceptions import RecordNotFoundError
from app.models.borrowing import BorrowingStatus
from app.models.sale import SaleStatus
from app.services.activity import ActivityService
from app.services.assignments import AssignmentService
from app.services.borrowings import BorrowingService
from app.services.sales import SaleService


def test_customer_history_merges_sales_and_borrowings(db, super_admin, catalogue, make_item):
    customer_id = catalogue["customer"].id
    first, second, third = make_item(), make_item(), make_item()
    sale = SaleService(db).create_sale(customer_id, [first.id, second.id], super_admin)
    borrowing = BorrowingService(db).create_borrowing(customer_id, [third.id], super_admin)
    voided = SaleService(db).void_sale(sale.id, super_admin)

    history = ActivityService(db).customer_history(customer_id)

    by_type = {entry["type"]: entry for entry in history}
    assert len(history) == 2
    assert by_type["SALE"]["record_id"] == sale.id
    assert by_type["SALE"]["status"] == SaleStatus.VOIDED.value
    assert by_type["SALE"]["total"] == voided.total
    assert by_type["BORROWING"]["record_id"] == borrowing.id
    assert by_type["BORROWING"]["item_count"] == 1
    dates = [entry["date"] for entry in history]
    assert dates == sorted(dates, reverse=True)


def test_active_borrowings_and_returned_items(db, admin, catalogue, make_item):
    customer_id = catalogue["customer"].id
    items = [make_item(), make_item(), make_item()]
    service = BorrowingService(db)
    done = service.create_borrowing(customer_id, [items[0].id], admin)
    open_ = service.create_borrowing(customer_id, [items[1].id, items[2].id], admin)
    service.return_items(done.id, [items[0].id], admin)
    service.return_items(open_.id, [items[1].id], admin)

    activity = ActivityService(db)
    active = activity.active_borrowings(customer_id)
    assert [borrowing.id for borrowing in active] == [open_.id]
    assert active[0].status == BorrowingStatus.PARTIALLY_RETURNED.value

    returned = activity.returned_items(customer_id)
    assert sorted(entry["item"].id for entry in returned) == sorted([items[0].id, items[1].id])
    assert {entry["borrowing_id"] for entry in returned} == {done.id, open_.id}
    assert all(entry["returned_at"] is not None for entry in returned)


def test_customer_views_need_known_customer(db):
    activity = ActivityService(db)
    with pytest.raises(RecordNotFoundError):
        activity.customer_history(9999)
    with pytest.raises(RecordNotFoundError):
        activity.active_borrowings(9999)
    with pytest.raises(RecordNotFoundError):
        activity.returned_items(9999)


def test_held_assets_and_asset_records(db, admin, employee, make_asset):
    kept, handed_back = make_asset(), make_asset()
    service = AssignmentService(db)
    assignment = service.create_assignment(employee.id, [kept.id, handed_back.id], admin)
    service.return_items(assignment.id, [handed_back.id], admin)

    activity = ActivityService(db)
    assert [item.id for item in activity.held_assets(employee.id)] == [kept.id]
    assert activity.held_assets(admin.id) == []

    records = activity.asset_records(employee.id)
    assert sorted(record.inventory_item_id for record in records) == sorted([kept.id, handed_back.id])
    open_records = activity.asset_records(employee.id, active_only=True)
    assert [record.inventory_item_id for record in open_records] == [kept.id]
    assert open_records[0].assignment_id == assignment.id

    with pytest.raises(RecordNotFoundError):
        activity.asset_records(9999)


def test_assignee_display_name(db, admin, employee, make_asset):
    asset = make_asset()
    AssignmentService(db).create_assignment(employee.id, [asset.id], admin)

    db.refresh(employee)
    assert employee.display_name == "Staff"
    assert len(employee.asset_assignments) == 1
    employee.full_name = None
    assert employee.display_name == "staff"
