"""Repair order model."""
import enum

from sqlalchemy import Column, Integer, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class RepairStatus(str, enum.Enum):
    """Repair order status. REPAIRING is the open state."""
    REPAIRING = "REPAIRING"
    PARTIALLY_RETURNED = "PARTIALLY_RETURNED"
    COMPLETED = "COMPLETED"


class RepairOutcome(str, enum.Enum):
    REPAIRED_SUCCESSFULLY = "REPAIRED_SUCCESSFULLY"
    UNREPAIRABLE = "UNREPAIRABLE"


class Repair(Base):
    """Repair order - a shipment of items from a sender to a repair receiver."""
    __tablename__ = "repairs"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("addresses.id"), nullable=False)
    receiver_id = Column(Integer, ForeignKey("addresses.id"), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    repair_date = Column(DateTime(timezone=True), server_default=func.now())
    notes = Column(Text, nullable=True)
    status = Column(String(30), default=RepairStatus.REPAIRING.value, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    sender = relationship("Address", foreign_keys=[sender_id])
    receiver = relationship("Address", foreign_keys=[receiver_id])
    customer = relationship("Customer")
    created_by = relationship("User")
    items = relationship(
        "RepairOnItem",
        back_populates="repair",
        cascade="all, delete-orphan",
        order_by="RepairOnItem.sent_at",
    )


class RepairOnItem(Base):
    """One item in a repair order, with its own return time and outcome."""
    __tablename__ = "repair_on_items"
    __table_args__ = (
        UniqueConstraint("repair_id", "inventory_item_id", name="uq_repair_item"),
    )

    id = Column(Integer, primary_key=True, index=True)
    repair_id = Column(Integer, ForeignKey("repairs.id"), nullable=False, index=True)
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    sent_at = Column(DateTime(timezone=True), server_default=func.now())
    returned_at = Column(DateTime(timezone=True), nullable=True)
    repair_outcome = Column(String(30), nullable=True)

    # Relationships
    repair = relationship("Repair", back_populates="items")
    item = relationship("InventoryItem", back_populates="repair_records")
