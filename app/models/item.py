"""Inventory item model - one physical unit, either stock for sale or a company asset."""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func

from app.database import Base


class ItemType(str, enum.Enum):
    """Discriminator between sale-bound stock and internally owned assets."""
    SALE = "SALE"
    ASSET = "ASSET"


class ItemOwner(str, enum.Enum):
    COMPANY = "COMPANY"
    CUSTOMER = "CUSTOMER"


class ItemStatus(str, enum.Enum):
    """Item status enum."""
    IN_STOCK = "IN_STOCK"
    IN_WAREHOUSE = "IN_WAREHOUSE"
    RESERVED = "RESERVED"
    SOLD = "SOLD"
    BORROWED = "BORROWED"
    ASSIGNED = "ASSIGNED"
    REPAIRING = "REPAIRING"
    DEFECTIVE = "DEFECTIVE"
    DECOMMISSIONED = "DECOMMISSIONED"
    RETURNED_TO_CUSTOMER = "RETURNED_TO_CUSTOMER"


# Statuses an item can ever hold, per item type
REACHABLE_STATUSES = {
    ItemType.SALE: frozenset({
        ItemStatus.IN_STOCK,
        ItemStatus.RESERVED,
        ItemStatus.SOLD,
        ItemStatus.BORROWED,
        ItemStatus.DEFECTIVE,
        ItemStatus.REPAIRING,
        ItemStatus.DECOMMISSIONED,
        ItemStatus.RETURNED_TO_CUSTOMER,
    }),
    ItemType.ASSET: frozenset({
        ItemStatus.IN_WAREHOUSE,
        ItemStatus.ASSIGNED,
        ItemStatus.DEFECTIVE,
        ItemStatus.REPAIRING,
        ItemStatus.DECOMMISSIONED,
        ItemStatus.RETURNED_TO_CUSTOMER,
    }),
}


def home_status(item_type: str) -> ItemStatus:
    """Status an item of the given type rests in when it is available."""
    return ItemStatus.IN_WAREHOUSE if item_type == ItemType.ASSET else ItemStatus.IN_STOCK


class InventoryItem(Base):
    """
    Inventory item model.

    Status only changes through the guarded operations in
    ``app.services.transitions``. A sale item that was sold keeps ``sale_id``
    while the sale stands; borrowing, assignment and repair links live in
    their join tables, where an open link is a row with ``returned_at`` unset.
    """
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    item_type = Column(String(20), nullable=False, index=True, default=ItemType.SALE.value)
    owner_type = Column(String(20), nullable=False, default=ItemOwner.COMPANY.value)
    status = Column(String(30), nullable=False, index=True, default=ItemStatus.IN_STOCK.value)

    # Identifiers - which ones are required depends on the category
    serial_number = Column(String(100), unique=True, index=True, nullable=True)
    mac_address = Column(String(17), unique=True, nullable=True)
    asset_code = Column(String(100), unique=True, index=True, nullable=True)
    notes = Column(Text, nullable=True)

    product_model_id = Column(Integer, ForeignKey("product_models.id"), nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    added_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    product_model = relationship("ProductModel", back_populates="items")
    supplier = relationship("Supplier")
    added_by = relationship("User")
    sale = relationship("Sale", back_populates="items_sold")
    borrowing_records = relationship("BorrowingOnItem", back_populates="item")
    assignment_records = relationship("AssetAssignmentOnItem", back_populates="item")
    repair_records = relationship("RepairOnItem", back_populates="item")
    events = relationship(
        "EventLog",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="EventLog.created_at.desc()",
    )

    @validates("status")
    def validate_status(self, key, value):
        status = ItemStatus(value)
        if self.item_type is not None and status not in REACHABLE_STATUSES[ItemType(self.item_type)]:
            raise ValueError(f"Status {status.value} is not valid for {self.item_type} items")
        return status.value

    @validates("item_type")
    def validate_item_type(self, key, value):
        return ItemType(value).value

    @validates("owner_type")
    def validate_owner_type(self, key, value):
        return ItemOwner(value).value
