"""Customer schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CustomerBase(BaseModel):
    customer_code: str
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    customer_code: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class CustomerResponse(CustomerBase):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerSummary(BaseModel):
    id: int
    customer_code: str
    name: str

    class Config:
        from_attributes = True


class CustomerHistoryEntry(BaseModel):
    """One sale or borrowing in a customer's combined timeline."""
    type: str
    record_id: int
    date: Optional[datetime] = None
    status: str
    item_count: int
    total: Optional[float] = None
