"""Product model routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth import require_admin, require_employee
from app.database import get_db
from app.models.brand import Brand
from app.models.category import Category
from app.models.product_model import ProductModel
from app.models.user import User
from app.schemas.product_model import ProductModelCreate, ProductModelResponse, ProductModelUpdate

router = APIRouter(prefix="/product-models", tags=["Product Models"])


def _get_product_model(db: Session, product_model_id: int) -> ProductModel:
    product_model = db.query(ProductModel).filter(ProductModel.id == product_model_id).first()
    if not product_model:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product model not found"
        )
    return product_model


def _check_references(db: Session, category_id: Optional[int], brand_id: Optional[int]):
    if category_id is not None and not db.query(Category).filter(Category.id == category_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )
    if brand_id is not None and not db.query(Brand).filter(Brand.id == brand_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Brand not found"
        )


@router.get("/", response_model=List[ProductModelResponse])
async def list_product_models(
    skip: int = 0,
    limit: int = 100,
    category_id: Optional[int] = Query(None, description="Filter by category"),
    brand_id: Optional[int] = Query(None, description="Filter by brand"),
    search: Optional[str] = Query(None, description="Search by model number or description"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    """List product models, optionally filtered by category, brand or search term."""
    query = db.query(ProductModel)

    if category_id:
        query = query.filter(ProductModel.category_id == category_id)
    if brand_id:
        query = query.filter(ProductModel.brand_id == brand_id)
    if search:
        search_term = f"%{search}%"
        query = query.filter(
            (ProductModel.model_number.ilike(search_term)) |
            (ProductModel.description.ilike(search_term))
        )

    return query.order_by(ProductModel.model_number).offset(skip).limit(limit).all()


@router.post("/", response_model=ProductModelResponse, status_code=status.HTTP_201_CREATED)
async def create_product_model(
    product_model_data: ProductModelCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a product model (admin). Model numbers are unique per brand."""
    _check_references(db, product_model_data.category_id, product_model_data.brand_id)

    product_model = ProductModel(**product_model_data.model_dump(), created_by_id=current_user.id)
    db.add(product_model)
    db.commit()
    db.refresh(product_model)
    return product_model


@router.get("/{product_model_id}", response_model=ProductModelResponse)
async def get_product_model(
    product_model_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return _get_product_model(db, product_model_id)


@router.put("/{product_model_id}", response_model=ProductModelResponse)
async def update_product_model(
    product_model_id: int,
    product_model_update: ProductModelUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Update a product model (admin). Price changes apply to future sales only."""
    product_model = _get_product_model(db, product_model_id)
    update_data = product_model_update.model_dump(exclude_unset=True)
    _check_references(db, update_data.get("category_id"), update_data.get("brand_id"))

    for field, value in update_data.items():
        setattr(product_model, field, value)
    db.commit()
    db.refresh(product_model)
    return product_model


@router.delete("/{product_model_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product_model(
    product_model_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    product_model = _get_product_model(db, product_model_id)
    db.delete(product_model)
    db.commit()
