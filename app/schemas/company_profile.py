"""Company profile schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CompanyProfileUpdate(BaseModel):
    name: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    phone: Optional[str] = None
    tax_id: Optional[str] = None


class CompanyProfileResponse(BaseModel):
    name: str
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    phone: Optional[str] = None
    tax_id: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
