"""Sale routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import require_admin, require_employee, require_super_admin
from app.database import get_db
from app.models.sale import SaleStatus
from app.models.user import User
from app.schemas.sale import SaleCreate, SaleResponse, SaleUpdate
from app.services.sales import SaleService

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get("/", response_model=List[SaleResponse])
async def list_sales(
    skip: int = 0,
    limit: int = 100,
    status: Optional[SaleStatus] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Search by customer name"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return SaleService(db).list_sales(
        skip=skip, limit=limit, status=status.value if status else None, search=search
    )


@router.post("/", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Sell in-stock items to a customer (admin)."""
    return SaleService(db).create_sale(sale_data.customer_id, sale_data.inventory_item_ids, current_user)


@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return SaleService(db).get_sale(sale_id)


@router.put("/{sale_id}", response_model=SaleResponse)
async def update_sale(
    sale_id: int,
    sale_update: SaleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Replace the customer and item list of a completed sale (admin)."""
    return SaleService(db).update_sale(
        sale_id, sale_update.customer_id, sale_update.inventory_item_ids, current_user
    )


@router.patch("/{sale_id}/void", response_model=SaleResponse)
async def void_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_super_admin)
):
    """Void a sale and put its items back in stock (super admin)."""
    return SaleService(db).void_sale(sale_id, current_user)
