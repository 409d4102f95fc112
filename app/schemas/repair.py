"""Repair order schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from app.models.repair import RepairOutcome, RepairStatus
from app.schemas.address import AddressResponse
from app.schemas.customer import CustomerSummary
from app.schemas.item import ItemSummary
from app.schemas.user import UserSummary


class RepairItemCreate(BaseModel):
    """One unit to send for repair.

    Existing items are referenced by ``id``. Customer units the system has
    never seen leave ``id`` empty and give a product model instead.
    """
    id: Optional[int] = None
    is_customer_item: bool = False
    product_model_id: Optional[int] = None
    serial_number: Optional[str] = None


class RepairCreate(BaseModel):
    """Schema for opening a repair order."""
    sender_id: int
    receiver_id: int
    customer_id: Optional[int] = None
    notes: Optional[str] = None
    items: List[RepairItemCreate]


class RepairItemReturn(BaseModel):
    inventory_item_id: int
    repair_outcome: RepairOutcome


class RepairReturnRequest(BaseModel):
    items_to_return: List[RepairItemReturn]


class RepairItemResponse(BaseModel):
    inventory_item_id: int
    sent_at: datetime
    returned_at: Optional[datetime] = None
    repair_outcome: Optional[RepairOutcome] = None
    item: ItemSummary

    class Config:
        from_attributes = True


class RepairResponse(BaseModel):
    """Schema for repair order response."""
    id: int
    sender: AddressResponse
    receiver: AddressResponse
    customer: Optional[CustomerSummary] = None
    created_by: UserSummary
    repair_date: datetime
    notes: Optional[str] = None
    status: RepairStatus
    updated_at: Optional[datetime] = None
    items: List[RepairItemResponse] = []

    class Config:
        from_attributes = True
