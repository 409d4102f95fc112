"""Sale schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from app.models.sale import SaleStatus
from app.schemas.customer import CustomerSummary
from app.schemas.item import ItemSummary
from app.schemas.user import UserSummary


class SaleCreate(BaseModel):
    """Schema for creating a sale."""
    customer_id: int
    inventory_item_ids: List[int]


class SaleUpdate(BaseModel):
    """New customer and full item list of a completed sale."""
    customer_id: int
    inventory_item_ids: List[int]


class SaleResponse(BaseModel):
    """Schema for sale response."""
    id: int
    customer_id: int
    customer: CustomerSummary
    sold_by: UserSummary
    sale_date: datetime
    subtotal: float
    vat_amount: float
    total: float
    notes: Optional[str] = None
    status: SaleStatus
    voided_at: Optional[datetime] = None
    voided_by: Optional[UserSummary] = None
    updated_at: Optional[datetime] = None
    items_sold: List[ItemSummary] = []

    class Config:
        from_attributes = True
