"""Read-only views over customers' and employees' transactions."""
from typing import List

from sqlalchemy.orm import Session

from app.models.assignment import AssetAssignment, AssetAssignmentOnItem
from app.models.borrowing import Borrowing, BorrowingOnItem, BorrowingStatus
from app.models.customer import Customer
from app.models.item import InventoryItem, ItemType
from app.models.sale import Sale
from app.models.user import User
from app.services.lookup import get_or_404


class ActivityService:

    def __init__(self, db: Session):
        self.db = db

    def customer_history(self, customer_id: int) -> List[dict]:
        """Sales and borrowings of a customer in one timeline, newest first."""
        customer = get_or_404(self.db, Customer, customer_id, "Customer")
        sales = self.db.query(Sale).filter(Sale.customer_id == customer.id).all()
        borrowings = self.db.query(Borrowing).filter(Borrowing.borrower_id == customer.id).all()

        entries = [
            {
                "type": "SALE",
                "record_id": sale.id,
                "date": sale.sale_date,
                "status": sale.status,
                # voided sales release their items
                "item_count": len(sale.items_sold),
                "total": sale.total,
            }
            for sale in sales
        ]
        entries.extend(
            {
                "type": "BORROWING",
                "record_id": borrowing.id,
                "date": borrowing.borrow_date,
                "status": borrowing.status,
                "item_count": len(borrowing.items),
            }
            for borrowing in borrowings
        )
        entries.sort(key=lambda entry: (entry["date"], entry["record_id"]), reverse=True)
        return entries

    def active_borrowings(self, customer_id: int) -> List[Borrowing]:
        """Borrowings of a customer that still have items out, oldest first."""
        customer = get_or_404(self.db, Customer, customer_id, "Customer")
        return (
            self.db.query(Borrowing)
            .filter(
                Borrowing.borrower_id == customer.id,
                Borrowing.status != BorrowingStatus.RETURNED.value,
            )
            .order_by(Borrowing.borrow_date, Borrowing.id)
            .all()
        )

    def returned_items(self, customer_id: int) -> List[dict]:
        """Items a customer borrowed and gave back, latest return first."""
        customer = get_or_404(self.db, Customer, customer_id, "Customer")
        links = (
            self.db.query(BorrowingOnItem)
            .join(BorrowingOnItem.borrowing)
            .filter(
                Borrowing.borrower_id == customer.id,
                BorrowingOnItem.returned_at.isnot(None),
            )
            .order_by(BorrowingOnItem.returned_at.desc(), BorrowingOnItem.id.desc())
            .all()
        )
        return [
            {
                "borrowing_id": link.borrowing_id,
                "borrow_date": link.borrowing.borrow_date,
                "returned_at": link.returned_at,
                "item": link.item,
            }
            for link in links
        ]

    def held_assets(self, user_id: int) -> List[InventoryItem]:
        """Assets currently assigned to a user."""
        return (
            self.db.query(InventoryItem)
            .join(InventoryItem.assignment_records)
            .join(AssetAssignmentOnItem.assignment)
            .filter(
                InventoryItem.item_type == ItemType.ASSET.value,
                AssetAssignment.assignee_id == user_id,
                AssetAssignmentOnItem.returned_at.is_(None),
            )
            .order_by(AssetAssignmentOnItem.assigned_at.desc(), InventoryItem.id.desc())
            .all()
        )

    def asset_records(self, user_id: int, active_only: bool = False) -> List[AssetAssignmentOnItem]:
        """Every asset ever handed to a user, newest first."""
        user = get_or_404(self.db, User, user_id, "User")
        query = (
            self.db.query(AssetAssignmentOnItem)
            .join(AssetAssignmentOnItem.assignment)
            .filter(AssetAssignment.assignee_id == user.id)
        )
        if active_only:
            query = query.filter(AssetAssignmentOnItem.returned_at.is_(None))
        return query.order_by(AssetAssignmentOnItem.assigned_at.desc(), AssetAssignmentOnItem.id.desc()).all()
