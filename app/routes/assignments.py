"""Asset assignment routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth import require_admin, require_employee
from app.database import get_db
from app.models.assignment import AssignmentStatus
from app.models.user import User
from app.schemas.assignment import AssignmentCreate, AssignmentResponse
from app.schemas.borrowing import ReturnRequest
from app.services.assignments import AssignmentService

router = APIRouter(prefix="/assignments", tags=["Assignments"])


@router.get("/", response_model=List[AssignmentResponse])
async def list_assignments(
    skip: int = 0,
    limit: int = 100,
    status: Optional[AssignmentStatus] = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return AssignmentService(db).list_assignments(
        skip=skip, limit=limit, status=status.value if status else None
    )


@router.post("/", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    assignment_data: AssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Assign warehouse assets to a user (admin)."""
    return AssignmentService(db).create_assignment(
        assignment_data.assignee_id,
        assignment_data.inventory_item_ids,
        current_user,
        notes=assignment_data.notes,
    )


@router.get("/{assignment_id}", response_model=AssignmentResponse)
async def get_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return AssignmentService(db).get_assignment(assignment_id)


@router.patch("/{assignment_id}/return", response_model=AssignmentResponse)
async def return_assigned_items(
    assignment_id: int,
    return_data: ReturnRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Take back some or all of the assigned assets (admin)."""
    return AssignmentService(db).return_items(assignment_id, return_data.item_ids, current_user)
