"""Product model schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.brand import BrandResponse
from app.schemas.category import CategoryResponse


class ProductModelBase(BaseModel):
    """Base product model schema."""
    model_number: str
    description: Optional[str] = None
    selling_price: float = Field(0.0, ge=0)
    category_id: int
    brand_id: int


class ProductModelCreate(ProductModelBase):
    pass


class ProductModelUpdate(BaseModel):
    model_number: Optional[str] = None
    description: Optional[str] = None
    selling_price: Optional[float] = Field(None, ge=0)
    category_id: Optional[int] = None
    brand_id: Optional[int] = None


class ProductModelResponse(ProductModelBase):
    """Product model with its category and brand."""
    id: int
    category: CategoryResponse
    brand: BrandResponse
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductModelSummary(BaseModel):
    id: int
    model_number: str
    selling_price: float
    category_id: int
    brand_id: int

    class Config:
        from_attributes = True
