"""Item history routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import require_employee
from app.database import get_db
from app.models.user import User
from app.schemas.item import ItemHistoryResponse
from app.services.inventory import InventoryService

router = APIRouter(prefix="/history", tags=["History"])


@router.get("/{item_id}", response_model=ItemHistoryResponse)
async def get_item_history(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    """An item (sale item or asset) with its full history, newest first."""
    item, events = InventoryService(db).get_history(item_id)
    return {"item": item, "events": events}
