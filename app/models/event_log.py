"""Event log model - audit trail of everything that happened to an item."""
import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class EventType(str, enum.Enum):
    """Item event types for history tracking."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    STATUS_CHANGE = "STATUS_CHANGE"
    SALE = "SALE"
    VOID = "VOID"
    BORROW = "BORROW"
    RETURN = "RETURN"
    ASSIGN = "ASSIGN"
    REPAIR_SENT = "REPAIR_SENT"
    REPAIR_RETURNED = "REPAIR_RETURNED"
    DECOMMISSION = "DECOMMISSION"
    REINSTATE = "REINSTATE"


class EventLog(Base):
    """
    History log for item operations.

    Rows are only ever inserted; they disappear solely with their item.
    """
    __tablename__ = "event_logs"

    id = Column(Integer, primary_key=True, index=True)
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)

    # Who performed the operation
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    event_type = Column(String(30), nullable=False)

    # Structured details, always with a human-readable "details" key
    details = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Relationships
    item = relationship("InventoryItem", back_populates="events")
    user = relationship("User")
