"""Borrowings: lending stock to customers and partial returns."""
import logging

import pytest

from app.exceptions import InvalidInputError, StatusConflictError
from app.models.borrowing import BorrowingStatus
from app.models.event_log import EventLog, EventType
from app.models.item import ItemStatus
from app.services.borrowings import BorrowingService
from app.services.sales import SaleService


@pytest.fixture
def borrowing_setup(db, admin, catalogue, make_item):
    items = [make_item(), make_item(), make_item()]
    borrowing = BorrowingService(db).create_borrowing(
        catalogue["customer"].id, [item.id for item in items], admin, notes="Trial units"
    )
    return borrowing, items


def test_create_borrowing_marks_items_borrowed(db, borrowing_setup):
    borrowing, items = borrowing_setup
    assert borrowing.status == BorrowingStatus.BORROWED.value
    assert len(borrowing.items) == 3
    for item in items:
        db.refresh(item)
        assert item.status == ItemStatus.BORROWED.value

    events = db.query(EventLog).filter(EventLog.event_type == EventType.BORROW.value).all()
    assert len(events) == 3
    assert all("Jane Buyer" in e.details["details"] for e in events)


def test_partial_then_full_return(db, admin, borrowing_setup):
    borrowing, items = borrowing_setup
    service = BorrowingService(db)

    borrowing = service.return_items(borrowing.id, [items[0].id, items[1].id], admin)
    assert borrowing.status == BorrowingStatus.PARTIALLY_RETURNED.value
    assert borrowing.return_date is None
    statuses = {item.id: item.status for item in items}
    assert statuses[items[0].id] == ItemStatus.IN_STOCK.value
    assert statuses[items[1].id] == ItemStatus.IN_STOCK.value
    assert statuses[items[2].id] == ItemStatus.BORROWED.value

    borrowing = service.return_items(borrowing.id, [items[2].id], admin)
    assert borrowing.status == BorrowingStatus.RETURNED.value
    assert borrowing.return_date is not None
    db.refresh(items[2])
    assert items[2].status == ItemStatus.IN_STOCK.value


def test_returning_same_item_twice_fails(db, admin, borrowing_setup):
    borrowing, items = borrowing_setup
    service = BorrowingService(db)
    service.return_items(borrowing.id, [items[0].id], admin)

    with pytest.raises(StatusConflictError):
        service.return_items(borrowing.id, [items[0].id], admin)


def test_returning_foreign_item_fails(db, admin, borrowing_setup, make_item):
    borrowing, items = borrowing_setup
    stranger = make_item()

    with pytest.raises(InvalidInputError):
        BorrowingService(db).return_items(borrowing.id, [items[0].id, stranger.id], admin)

    db.refresh(items[0])
    assert items[0].status == ItemStatus.BORROWED.value


def test_fully_returned_borrowing_rejects_further_returns(db, admin, borrowing_setup):
    borrowing, items = borrowing_setup
    service = BorrowingService(db)
    service.return_items(borrowing.id, [item.id for item in items], admin)

    with pytest.raises(StatusConflictError):
        service.return_items(borrowing.id, [items[0].id], admin)


def test_borrowed_item_cannot_be_borrowed_again(db, admin, catalogue, borrowing_setup):
    _, items = borrowing_setup
    with pytest.raises(StatusConflictError):
        BorrowingService(db).create_borrowing(catalogue["customer"].id, [items[0].id], admin)


def test_failed_borrowing_leaves_no_trace(db, admin, catalogue, make_item):
    fresh, sold = make_item(), make_item()
    SaleService(db).create_sale(catalogue["customer"].id, [sold.id], admin)

    with pytest.raises(StatusConflictError):
        BorrowingService(db).create_borrowing(catalogue["customer"].id, [fresh.id, sold.id], admin)

    db.refresh(fresh)
    assert fresh.status == ItemStatus.IN_STOCK.value
    assert db.query(EventLog).filter(EventLog.event_type == EventType.BORROW.value).count() == 0
    assert BorrowingService(db).list_borrowings() == []


def test_repeated_ids_in_return_are_counted_once(db, admin, borrowing_setup, caplog):
    borrowing, items = borrowing_setup
    caplog.set_level(logging.INFO, logger="app.services.borrowings")

    borrowing = BorrowingService(db).return_items(borrowing.id, [items[0].id, items[0].id], admin)

    assert borrowing.status == BorrowingStatus.PARTIALLY_RETURNED.value
    assert f"Borrowing {borrowing.id}: 1 items returned" in caplog.text
    returns = db.query(EventLog).filter(EventLog.event_type == EventType.RETURN.value).count()
    assert returns == 1
