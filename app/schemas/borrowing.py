"""Borrowing schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, computed_field

from app.models.borrowing import BorrowingStatus
from app.schemas.customer import CustomerSummary
from app.schemas.item import ItemSummary
from app.schemas.user import UserSummary


class BorrowingCreate(BaseModel):
    """Schema for lending items to a customer."""
    customer_id: int
    inventory_item_ids: List[int]
    due_date: Optional[datetime] = None
    notes: Optional[str] = None


class ReturnRequest(BaseModel):
    """Items coming back from a borrowing or an assignment."""
    item_ids: List[int]


class BorrowingItemResponse(BaseModel):
    inventory_item_id: int
    borrowed_at: datetime
    returned_at: Optional[datetime] = None
    item: ItemSummary

    class Config:
        from_attributes = True


class BorrowingResponse(BaseModel):
    """Schema for borrowing response."""
    id: int
    borrower: CustomerSummary
    approved_by: UserSummary
    borrow_date: datetime
    due_date: Optional[datetime] = None
    return_date: Optional[datetime] = None
    notes: Optional[str] = None
    status: BorrowingStatus
    items: List[BorrowingItemResponse] = []

    @computed_field
    @property
    def total_item_count(self) -> int:
        return len(self.items)

    @computed_field
    @property
    def returned_item_count(self) -> int:
        return sum(1 for link in self.items if link.returned_at is not None)

    class Config:
        from_attributes = True


class ReturnedItemResponse(BaseModel):
    """A borrowed item that has come back, with the borrowing it went out on."""
    borrowing_id: int
    borrow_date: datetime
    returned_at: datetime
    item: ItemSummary
