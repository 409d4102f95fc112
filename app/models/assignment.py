"""Asset assignment model - company assets handed to employees."""
import enum

from sqlalchemy import Column, Integer, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class AssignmentStatus(str, enum.Enum):
    ASSIGNED = "ASSIGNED"
    PARTIALLY_RETURNED = "PARTIALLY_RETURNED"
    RETURNED = "RETURNED"


class AssetAssignment(Base):
    __tablename__ = "asset_assignments"

    id = Column(Integer, primary_key=True, index=True)
    assignee_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    approved_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    assigned_date = Column(DateTime(timezone=True), server_default=func.now())
    return_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(30), default=AssignmentStatus.ASSIGNED.value, nullable=False, index=True)

    # Relationships
    assignee = relationship("User", foreign_keys=[assignee_id], back_populates="asset_assignments")
    approved_by = relationship("User", foreign_keys=[approved_by_id])
    items = relationship("AssetAssignmentOnItem", back_populates="assignment", cascade="all, delete-orphan")


class AssetAssignmentOnItem(Base):
    """One assigned asset. ``returned_at`` is set when that asset comes back."""
    __tablename__ = "asset_assignment_on_items"
    __table_args__ = (
        UniqueConstraint("assignment_id", "inventory_item_id", name="uq_assignment_item"),
    )

    id = Column(Integer, primary_key=True, index=True)
    assignment_id = Column(Integer, ForeignKey("asset_assignments.id"), nullable=False, index=True)
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    assigned_at = Column(DateTime(timezone=True), server_default=func.now())
    returned_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    assignment = relationship("AssetAssignment", back_populates="items")
    item = relationship("InventoryItem", back_populates="assignment_records")
