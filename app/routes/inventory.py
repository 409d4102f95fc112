"""Inventory (sale item) routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import require_admin, require_employee
from app.database import get_db
from app.models.item import ItemStatus, ItemType
from app.models.user import User
from app.schemas.item import ItemBatchCreate, ItemCreate, ItemResponse, ItemUpdate
from app.services.inventory import InventoryService
from app.services.transitions import Operation

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("/", response_model=List[ItemResponse])
async def list_inventory(
    skip: int = 0,
    limit: int = 100,
    status: Optional[ItemStatus] = Query(None, description="Filter by status"),
    product_model_id: Optional[int] = Query(None, description="Filter by product model"),
    search: Optional[str] = Query(None, description="Search by serial number, MAC address or model number"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    """List sale items, newest first."""
    return InventoryService(db).list_items(
        ItemType.SALE,
        skip=skip,
        limit=limit,
        status=status.value if status else None,
        product_model_id=product_model_id,
        search=search,
    )


@router.post("/", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    item_data: ItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Add one sale item (admin)."""
    return InventoryService(db).add_item(item_data, current_user)


@router.post("/batch", response_model=List[ItemResponse], status_code=status.HTTP_201_CREATED)
async def create_inventory_batch(
    batch_data: ItemBatchCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Add several units of one product model (admin). Either all are added or none."""
    return InventoryService(db).add_items_batch(batch_data, current_user)


@router.get("/{item_id}", response_model=ItemResponse)
async def get_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return InventoryService(db).get_item(item_id, ItemType.SALE)


@router.put("/{item_id}", response_model=ItemResponse)
async def update_inventory_item(
    item_id: int,
    item_update: ItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Update a sale item's details (admin)."""
    return InventoryService(db).update_item(item_id, item_update, current_user, ItemType.SALE)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete a sale item that has no transaction history (admin)."""
    InventoryService(db).delete_item(item_id, ItemType.SALE)


@router.patch("/{item_id}/reserve", response_model=ItemResponse)
async def reserve_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return InventoryService(db).change_status(item_id, Operation.RESERVE, current_user, ItemType.SALE)


@router.patch("/{item_id}/unreserve", response_model=ItemResponse)
async def unreserve_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return InventoryService(db).change_status(item_id, Operation.UNRESERVE, current_user, ItemType.SALE)


@router.patch("/{item_id}/defect", response_model=ItemResponse)
async def mark_item_defective(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return InventoryService(db).change_status(item_id, Operation.MARK_DEFECTIVE, current_user, ItemType.SALE)


@router.patch("/{item_id}/in-stock", response_model=ItemResponse)
async def mark_item_in_stock(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Put a defective item back in stock (admin)."""
    return InventoryService(db).change_status(item_id, Operation.RESTORE, current_user, ItemType.SALE)


@router.patch("/{item_id}/decommission", response_model=ItemResponse)
async def decommission_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return InventoryService(db).change_status(item_id, Operation.DECOMMISSION, current_user, ItemType.SALE)


@router.patch("/{item_id}/reinstate", response_model=ItemResponse)
async def reinstate_item(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return InventoryService(db).change_status(item_id, Operation.REINSTATE, current_user, ItemType.SALE)
