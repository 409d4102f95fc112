"""Asset assignment schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, computed_field

from app.models.assignment import AssignmentStatus
from app.schemas.item import ItemSummary
from app.schemas.user import UserSummary


class AssignmentCreate(BaseModel):
    """Schema for assigning assets to a user."""
    assignee_id: int
    inventory_item_ids: List[int]
    notes: Optional[str] = None


class AssignmentItemResponse(BaseModel):
    inventory_item_id: int
    assigned_at: datetime
    returned_at: Optional[datetime] = None
    item: ItemSummary

    class Config:
        from_attributes = True


class AssignmentResponse(BaseModel):
    """Schema for assignment response."""
    id: int
    assignee: UserSummary
    approved_by: UserSummary
    assigned_date: datetime
    return_date: Optional[datetime] = None
    notes: Optional[str] = None
    status: AssignmentStatus
    items: List[AssignmentItemResponse] = []

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


class AssetHoldingResponse(BaseModel):
    """One asset handed to a user, open while ``returned_at`` is empty."""
    assignment_id: int
    assigned_at: datetime
    returned_at: Optional[datetime] = None
    item: ItemSummary

    class Config:
        from_attributes = True
