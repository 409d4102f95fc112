"""Product model - the catalogue entry every physical item points at."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Float, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class ProductModel(Base):
    """A model number of a brand, with its selling price."""
    __tablename__ = "product_models"
    __table_args__ = (
        UniqueConstraint("model_number", "brand_id", name="uq_product_model_brand"),
    )

    id = Column(Integer, primary_key=True, index=True)
    model_number = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    selling_price = Column(Float, nullable=False, default=0.0)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    category = relationship("Category", back_populates="product_models")
    brand = relationship("Brand", back_populates="product_models")
    items = relationship("InventoryItem", back_populates="product_model")
