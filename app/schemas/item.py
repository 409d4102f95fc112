"""Inventory item and asset schemas for request/response validation."""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from app.models.item import ItemOwner, ItemStatus, ItemType
from app.schemas.product_model import ProductModelSummary
from app.schemas.user import UserSummary


class ItemCreate(BaseModel):
    """Schema for registering one sale item."""
    product_model_id: int
    supplier_id: int
    serial_number: Optional[str] = None
    mac_address: Optional[str] = None
    notes: Optional[str] = None


class ItemBatchEntry(BaseModel):
    serial_number: Optional[str] = None
    mac_address: Optional[str] = None


class ItemBatchCreate(BaseModel):
    """Schema for registering several units of one product model."""
    product_model_id: int
    supplier_id: int
    items: List[ItemBatchEntry]


class ItemUpdate(BaseModel):
    """Schema for updating a sale item. Status is changed through the actions only."""
    product_model_id: Optional[int] = None
    supplier_id: Optional[int] = None
    serial_number: Optional[str] = None
    mac_address: Optional[str] = None
    notes: Optional[str] = None


class AssetCreate(BaseModel):
    """Schema for registering a company asset."""
    asset_code: str
    product_model_id: int
    supplier_id: Optional[int] = None
    serial_number: Optional[str] = None
    mac_address: Optional[str] = None
    notes: Optional[str] = None


class AssetUpdate(ItemUpdate):
    asset_code: Optional[str] = None


class ItemResponse(BaseModel):
    """Schema for item response."""
    id: int
    item_type: ItemType
    owner_type: ItemOwner
    status: ItemStatus
    serial_number: Optional[str] = None
    mac_address: Optional[str] = None
    asset_code: Optional[str] = None
    notes: Optional[str] = None
    product_model_id: int
    supplier_id: Optional[int] = None
    sale_id: Optional[int] = None
    product_model: ProductModelSummary
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItemSummary(BaseModel):
    id: int
    item_type: ItemType
    owner_type: ItemOwner
    status: ItemStatus
    serial_number: Optional[str] = None
    asset_code: Optional[str] = None
    product_model_id: int

    class Config:
        from_attributes = True


class EventLogResponse(BaseModel):
    """One entry of an item's history."""
    id: int
    inventory_item_id: int
    event_type: str
    details: Optional[Dict[str, Any]] = None
    user: Optional[UserSummary] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ItemHistoryResponse(BaseModel):
    """An item together with its history, newest event first."""
    item: ItemResponse
    events: List[EventLogResponse]
