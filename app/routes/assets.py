"""Company asset routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import require_admin, require_employee
from app.database import get_db
from app.models.item import ItemStatus, ItemType
from app.models.user import User
from app.schemas.item import AssetCreate, AssetUpdate, ItemResponse
from app.services.inventory import InventoryService
from app.services.transitions import Operation

router = APIRouter(prefix="/assets", tags=["Assets"])


@router.get("/", response_model=List[ItemResponse])
async def list_assets(
    skip: int = 0,
    limit: int = 100,
    status: Optional[ItemStatus] = Query(None, description="Filter by status"),
    product_model_id: Optional[int] = Query(None, description="Filter by product model"),
    search: Optional[str] = Query(None, description="Search by asset code, serial number or model number"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    """List company assets, newest first."""
    return InventoryService(db).list_items(
        ItemType.ASSET,
        skip=skip,
        limit=limit,
        status=status.value if status else None,
        product_model_id=product_model_id,
        search=search,
    )


@router.post("/", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_asset(
    asset_data: AssetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Register a company asset (admin)."""
    return InventoryService(db).add_asset(asset_data, current_user)


@router.get("/{asset_id}", response_model=ItemResponse)
async def get_asset(
    asset_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return InventoryService(db).get_item(asset_id, ItemType.ASSET)


@router.put("/{asset_id}", response_model=ItemResponse)
async def update_asset(
    asset_id: int,
    asset_update: AssetUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return InventoryService(db).update_item(asset_id, asset_update, current_user, ItemType.ASSET)


@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_asset(
    asset_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete an asset that was never assigned or repaired (admin)."""
    InventoryService(db).delete_item(asset_id, ItemType.ASSET)


@router.patch("/{asset_id}/defect", response_model=ItemResponse)
async def mark_asset_defective(
    asset_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return InventoryService(db).change_status(asset_id, Operation.MARK_DEFECTIVE, current_user, ItemType.ASSET)


@router.patch("/{asset_id}/in-warehouse", response_model=ItemResponse)
async def mark_asset_in_warehouse(
    asset_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Put a defective asset back in the warehouse (admin)."""
    return InventoryService(db).change_status(asset_id, Operation.RESTORE, current_user, ItemType.ASSET)


@router.patch("/{asset_id}/decommission", response_model=ItemResponse)
async def decommission_asset(
    asset_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return InventoryService(db).change_status(asset_id, Operation.DECOMMISSION, current_user, ItemType.ASSET)


@router.patch("/{asset_id}/reinstate", response_model=ItemResponse)
async def reinstate_asset(
    asset_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    return InventoryService(db).change_status(asset_id, Operation.REINSTATE, current_user, ItemType.ASSET)
