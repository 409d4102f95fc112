"""Sale model."""
import enum

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Float, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class SaleStatus(str, enum.Enum):
    """Sale status enum."""
    COMPLETED = "COMPLETED"
    VOIDED = "VOIDED"


class Sale(Base):
    """Sale to a customer. Voided sales are kept as history."""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    sold_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    sale_date = Column(DateTime(timezone=True), server_default=func.now())
    subtotal = Column(Float, nullable=False, default=0.0)
    vat_amount = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False, default=0.0)
    notes = Column(Text, nullable=True)
    status = Column(String(20), default=SaleStatus.COMPLETED.value, nullable=False, index=True)
    voided_at = Column(DateTime(timezone=True), nullable=True)
    voided_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    customer = relationship("Customer", back_populates="sales")
    sold_by = relationship("User", foreign_keys=[sold_by_id])
    voided_by = relationship("User", foreign_keys=[voided_by_id])
    items_sold = relationship("InventoryItem", back_populates="sale")
