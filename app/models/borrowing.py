"""Borrowing model - sale items lent to a customer."""
import enum

from sqlalchemy import Column, Integer, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class BorrowingStatus(str, enum.Enum):
    BORROWED = "BORROWED"
    PARTIALLY_RETURNED = "PARTIALLY_RETURNED"
    RETURNED = "RETURNED"


class Borrowing(Base):
    __tablename__ = "borrowings"

    id = Column(Integer, primary_key=True, index=True)
    borrower_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    approved_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    borrow_date = Column(DateTime(timezone=True), server_default=func.now())
    due_date = Column(DateTime(timezone=True), nullable=True)
    return_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(30), default=BorrowingStatus.BORROWED.value, nullable=False, index=True)

    # Relationships
    borrower = relationship("Customer", back_populates="borrowings")
    approved_by = relationship("User")
    items = relationship("BorrowingOnItem", back_populates="borrowing", cascade="all, delete-orphan")


class BorrowingOnItem(Base):
    """One borrowed item. ``returned_at`` is set when that item comes back."""
    __tablename__ = "borrowing_on_items"
    __table_args__ = (
        UniqueConstraint("borrowing_id", "inventory_item_id", name="uq_borrowing_item"),
    )

    id = Column(Integer, primary_key=True, index=True)
    borrowing_id = Column(Integer, ForeignKey("borrowings.id"), nullable=False, index=True)
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    borrowed_at = Column(DateTime(timezone=True), server_default=func.now())
    returned_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    borrowing = relationship("Borrowing", back_populates="items")
    item = relationship("InventoryItem", back_populates="borrowing_records")
