"""Borrowings - lending stock items to customers and taking them back."""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.database import transaction
from app.exceptions import StatusConflictError
from app.models.borrowing import Borrowing, BorrowingOnItem, BorrowingStatus
from app.models.customer import Customer
from app.models.item import ItemType
from app.models.user import User
from app.services.audit import log_event
from app.services.lookup import get_or_404, lock_items
from app.services.returns import close_links
from app.services.transitions import Operation, apply_transition, check_transition, derive_return_status

logger = logging.getLogger(__name__)


class BorrowingService:

    def __init__(self, db: Session):
        self.db = db

    def list_borrowings(self, skip: int = 0, limit: int = 100, status: Optional[str] = None) -> List[Borrowing]:
        query = self.db.query(Borrowing)
        if status:
            query = query.filter(Borrowing.status == status)
        return query.order_by(Borrowing.borrow_date.desc(), Borrowing.id.desc()).offset(skip).limit(limit).all()

    def get_borrowing(self, borrowing_id: int) -> Borrowing:
        return get_or_404(self.db, Borrowing, borrowing_id, "Borrowing record")

    def create_borrowing(
        self,
        borrower_id: int,
        item_ids: List[int],
        actor: User,
        due_date: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> Borrowing:
        """Lend IN_STOCK items to a customer."""
        with transaction(self.db):
            items = lock_items(self.db, item_ids, ItemType.SALE)
            for item in items:
                check_transition(item, Operation.BORROW)

            borrower = get_or_404(self.db, Customer, borrower_id, "Customer")

            borrowing = Borrowing(
                borrower_id=borrower.id,
                approved_by_id=actor.id,
                due_date=due_date,
                notes=notes,
                status=BorrowingStatus.BORROWED.value,
            )
            self.db.add(borrowing)
            self.db.flush()

            for item in items:
                self.db.add(BorrowingOnItem(borrowing_id=borrowing.id, inventory_item_id=item.id))
                rule = apply_transition(item, Operation.BORROW)
                log_event(
                    self.db, item.id, actor.id, rule.event_type,
                    f"Item borrowed by {borrower.name}.",
                    borrowing_id=borrowing.id, customer_name=borrower.name,
                )

        self.db.refresh(borrowing)
        logger.info(f"Borrowing {borrowing.id} created by user {actor.id}: {len(items)} items")
        return borrowing

    def return_items(self, borrowing_id: int, item_ids: List[int], actor: User) -> Borrowing:
        """Take back some or all borrowed items, then re-derive the borrowing status."""
        with transaction(self.db):
            borrowing = get_or_404(self.db, Borrowing, borrowing_id, "Borrowing record")
            if borrowing.status == BorrowingStatus.RETURNED.value:
                raise StatusConflictError(
                    "All items of this borrowing have already been returned.",
                    current_status=borrowing.status,
                    allowed=[BorrowingStatus.BORROWED.value, BorrowingStatus.PARTIALLY_RETURNED.value],
                )

            outstanding, returned_at = close_links(
                self.db, borrowing, BorrowingOnItem, BorrowingOnItem.borrowing_id,
                item_ids, Operation.RETURN_BORROWED, actor,
                f"Item returned from {borrowing.borrower.name}.",
                borrowing_id=borrowing.id,
            )

            borrowing.status = derive_return_status(
                outstanding, BorrowingStatus.RETURNED, BorrowingStatus.PARTIALLY_RETURNED
            ).value
            borrowing.return_date = returned_at if outstanding == 0 else None

        self.db.refresh(borrowing)
        logger.info(f"Borrowing {borrowing.id}: {len(set(item_ids))} items returned, status {borrowing.status}")
        return borrowing
