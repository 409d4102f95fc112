"""Borrowing routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import require_admin, require_employee
from app.database import get_db
from app.models.borrowing import BorrowingStatus
from app.models.user import User
from app.schemas.borrowing import BorrowingCreate, BorrowingResponse, ReturnRequest
from app.services.borrowings import BorrowingService

router = APIRouter(prefix="/borrowings", tags=["Borrowings"])


@router.get("/", response_model=List[BorrowingResponse])
async def list_borrowings(
    skip: int = 0,
    limit: int = 100,
    status: Optional[BorrowingStatus] = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return BorrowingService(db).list_borrowings(
        skip=skip, limit=limit, status=status.value if status else None
    )


@router.post("/", response_model=BorrowingResponse, status_code=status.HTTP_201_CREATED)
async def create_borrowing(
    borrowing_data: BorrowingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Lend in-stock items to a customer (admin)."""
    return BorrowingService(db).create_borrowing(
        borrowing_data.customer_id,
        borrowing_data.inventory_item_ids,
        current_user,
        due_date=borrowing_data.due_date,
        notes=borrowing_data.notes,
    )


@router.get("/{borrowing_id}", response_model=BorrowingResponse)
async def get_borrowing(
    borrowing_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return BorrowingService(db).get_borrowing(borrowing_id)


@router.patch("/{borrowing_id}/return", response_model=BorrowingResponse)
async def return_borrowed_items(
    borrowing_id: int,
    return_data: ReturnRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Take back some or all of the borrowed items (admin)."""
    return BorrowingService(db).return_items(borrowing_id, return_data.item_ids, current_user)
