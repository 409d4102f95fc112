"""Sales - selling stock items to customers, and voiding or editing those sales."""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.database import transaction
from app.exceptions import StatusConflictError
from app.models.customer import Customer
from app.models.event_log import EventType
from app.models.item import InventoryItem, ItemType
from app.models.sale import Sale, SaleStatus
from app.models.user import User
from app.services.audit import log_event
from app.services.lookup import get_or_404, lock_items, unique_ids
from app.services.transitions import Operation, apply_transition, check_transition

logger = logging.getLogger(__name__)


def compute_totals(items: Iterable[InventoryItem], vat_rate: Optional[float] = None):
    """Return (subtotal, vat_amount, total) for the items' selling prices."""
    rate = settings.VAT_RATE if vat_rate is None else vat_rate
    subtotal = sum((item.product_model.selling_price or 0.0) for item in items)
    vat_amount = subtotal * rate
    return round(subtotal, 2), round(vat_amount, 2), round(subtotal + vat_amount, 2)


class SaleService:
    """Sale operations. Every mutating call is a single all-or-nothing transaction."""

    def __init__(self, db: Session):
        self.db = db

    def list_sales(
        self,
        skip: int = 0,
        limit: int = 100,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Sale]:
        query = self.db.query(Sale)
        if status:
            query = query.filter(Sale.status == status)
        if search:
            query = query.join(Sale.customer).filter(Customer.name.ilike(f"%{search}%"))
        return query.order_by(Sale.sale_date.desc(), Sale.id.desc()).offset(skip).limit(limit).all()

    def get_sale(self, sale_id: int) -> Sale:
        return get_or_404(self.db, Sale, sale_id, "Sale")

    def create_sale(self, customer_id: int, item_ids: List[int], actor: User) -> Sale:
        """Sell IN_STOCK items to a customer, adding VAT to the total."""
        with transaction(self.db):
            items = lock_items(self.db, item_ids, ItemType.SALE)
            for item in items:
                check_transition(item, Operation.SELL)

            customer = get_or_404(self.db, Customer, customer_id, "Customer")

            subtotal, vat_amount, total = compute_totals(items)
            sale = Sale(
                customer_id=customer.id,
                sold_by_id=actor.id,
                subtotal=subtotal,
                vat_amount=vat_amount,
                total=total,
                status=SaleStatus.COMPLETED.value,
            )
            self.db.add(sale)
            self.db.flush()

            for item in items:
                rule = apply_transition(item, Operation.SELL)
                item.sale = sale
                log_event(
                    self.db, item.id, actor.id, rule.event_type,
                    f"Item sold to {customer.name}.",
                    sale_id=sale.id, customer_name=customer.name,
                )

        self.db.refresh(sale)
        logger.info(f"Sale {sale.id} created by user {actor.id}: {len(items)} items, total {sale.total}")
        return sale

    def void_sale(self, sale_id: int, actor: User) -> Sale:
        """Put a completed sale's items back in stock and mark the sale VOIDED."""
        with transaction(self.db):
            sale = get_or_404(self.db, Sale, sale_id, "Sale")
            if sale.status == SaleStatus.VOIDED.value:
                raise StatusConflictError(
                    "This sale has already been voided.",
                    current_status=sale.status,
                    allowed=[SaleStatus.COMPLETED.value],
                )

            items = lock_items(self.db, [item.id for item in sale.items_sold]) if sale.items_sold else []
            for item in items:
                check_transition(item, Operation.VOID_SALE)

            for item in items:
                rule = apply_transition(item, Operation.VOID_SALE)
                item.sale = None
                log_event(
                    self.db, item.id, actor.id, rule.event_type,
                    f"Sale ID: {sale.id} was voided.",
                    sale_id=sale.id,
                )

            sale.status = SaleStatus.VOIDED.value
            sale.voided_at = datetime.now(timezone.utc)
            sale.voided_by_id = actor.id

        self.db.refresh(sale)
        logger.info(f"Sale {sale.id} voided by user {actor.id}")
        return sale

    def update_sale(self, sale_id: int, customer_id: int, item_ids: List[int], actor: User) -> Sale:
        """Change the customer and item list of a completed sale.

        Items dropped from the sale go back in stock, added items must be in
        stock, and the totals are recomputed from the final item list.
        """
        new_ids = unique_ids(item_ids)
        with transaction(self.db):
            sale = get_or_404(self.db, Sale, sale_id, "Sale")
            if sale.status != SaleStatus.COMPLETED.value:
                raise StatusConflictError(
                    "Only completed sales can be edited.",
                    current_status=sale.status,
                    allowed=[SaleStatus.COMPLETED.value],
                )
            customer = get_or_404(self.db, Customer, customer_id, "Customer")

            current_ids = [item.id for item in sale.items_sold]
            removed_ids = [item_id for item_id in current_ids if item_id not in new_ids]
            added_ids = [item_id for item_id in new_ids if item_id not in current_ids]

            removed = lock_items(self.db, removed_ids) if removed_ids else []
            added = lock_items(self.db, added_ids, ItemType.SALE) if added_ids else []
            for item in removed:
                check_transition(item, Operation.VOID_SALE)
            for item in added:
                check_transition(item, Operation.SELL)

            for item in removed:
                rule = apply_transition(item, Operation.VOID_SALE)
                item.sale = None
                log_event(
                    self.db, item.id, actor.id, rule.event_type,
                    f"Item removed from sale ID: {sale.id}.",
                    sale_id=sale.id,
                )
            for item in added:
                rule = apply_transition(item, Operation.SELL)
                item.sale = sale
                log_event(
                    self.db, item.id, actor.id, rule.event_type,
                    f"Item sold to {customer.name}.",
                    sale_id=sale.id, customer_name=customer.name,
                )
            for item in sale.items_sold:
                if item.id not in added_ids:
                    log_event(
                        self.db, item.id, actor.id, EventType.UPDATE,
                        f"Sale ID: {sale.id} was updated.",
                        sale_id=sale.id,
                    )

            sale.customer_id = customer.id
            sale.subtotal, sale.vat_amount, sale.total = compute_totals(sale.items_sold)

        self.db.refresh(sale)
        logger.info(
            f"Sale {sale.id} updated by user {actor.id}: +{len(added_ids)} / -{len(removed_ids)} items"
        )
        return sale
