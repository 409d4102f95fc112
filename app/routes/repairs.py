"""Repair order routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import require_admin, require_employee
from app.database import get_db
from app.models.repair import RepairStatus
from app.models.user import User
from app.schemas.repair import RepairCreate, RepairResponse, RepairReturnRequest
from app.services.repairs import RepairService

router = APIRouter(prefix="/repairs", tags=["Repairs"])


@router.get("/", response_model=List[RepairResponse])
async def list_repairs(
    skip: int = 0,
    limit: int = 100,
    status: Optional[RepairStatus] = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return RepairService(db).list_repairs(skip=skip, limit=limit, status=status.value if status else None)


@router.post("/", response_model=RepairResponse, status_code=status.HTTP_201_CREATED)
async def create_repair(
    repair_data: RepairCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Send company items and/or customer units for repair (admin)."""
    return RepairService(db).create_repair(
        repair_data.sender_id,
        repair_data.receiver_id,
        repair_data.items,
        current_user,
        customer_id=repair_data.customer_id,
        notes=repair_data.notes,
    )


@router.get("/{repair_id}", response_model=RepairResponse)
async def get_repair(
    repair_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return RepairService(db).get_repair(repair_id)


@router.post("/{repair_id}/return", response_model=RepairResponse)
async def return_repaired_items(
    repair_id: int,
    return_data: RepairReturnRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Record which items came back from repair and with what outcome (admin)."""
    return RepairService(db).return_items(repair_id, return_data.items_to_return, current_user)
