"""Customer routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.auth import require_admin, require_employee
from app.database import get_db
from app.models.customer import Customer
from app.models.sale import Sale
from app.models.user import User
from app.schemas.borrowing import BorrowingResponse, ReturnedItemResponse
from app.schemas.customer import CustomerCreate, CustomerHistoryEntry, CustomerResponse, CustomerUpdate
from app.schemas.sale import SaleResponse
from app.services.activity import ActivityService

router = APIRouter(prefix="/customers", tags=["Customers"])


def _get_customer(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )
    return customer


@router.get("/", response_model=List[CustomerResponse])
async def list_customers(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = Query(None, description="Search by code, name or phone"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    query = db.query(Customer)
    if search:
        search_term = f"%{search}%"
        query = query.filter(
            (Customer.customer_code.ilike(search_term)) |
            (Customer.name.ilike(search_term)) |
            (Customer.phone.ilike(search_term))
        )
    return query.order_by(Customer.name).offset(skip).limit(limit).all()


@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: CustomerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a customer (admin)."""
    customer = Customer(**customer_data.model_dump(), created_by_id=current_user.id)
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return _get_customer(db, customer_id)


@router.get("/{customer_id}/purchase-history", response_model=List[SaleResponse])
async def get_purchase_history(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    """All sales of a customer, voided ones included, newest first."""
    customer = _get_customer(db, customer_id)
    return (
        db.query(Sale)
        .filter(Sale.customer_id == customer.id)
        .order_by(Sale.sale_date.desc(), Sale.id.desc())
        .all()
    )


@router.get("/{customer_id}/history", response_model=List[CustomerHistoryEntry])
async def get_customer_history(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    """Sales and borrowings of a customer, newest first."""
    return ActivityService(db).customer_history(customer_id)


@router.get("/{customer_id}/active-borrowings", response_model=List[BorrowingResponse])
async def get_active_borrowings(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return ActivityService(db).active_borrowings(customer_id)


@router.get("/{customer_id}/returned-history", response_model=List[ReturnedItemResponse])
async def get_returned_history(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    return ActivityService(db).returned_items(customer_id)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    customer_update: CustomerUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    customer = _get_customer(db, customer_id)
    for field, value in customer_update.model_dump(exclude_unset=True).items():
        setattr(customer, field, value)
    db.commit()
    db.refresh(customer)
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    customer = _get_customer(db, customer_id)
    db.delete(customer)
    db.commit()
