"""Repair orders - sending company or customer units out for repair and taking them back.

On return, the new status of an item is decided by ``resolve_repair_return_status``:

1. customer-owned items, and items whose sale is still COMPLETED, go back to
   the customer whatever the outcome;
2. otherwise a successful repair puts the item back in stock / warehouse;
3. otherwise the item is decommissioned.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from app.database import transaction
from app.exceptions import InvalidInputError, StatusConflictError
from app.models.address import Address
from app.models.customer import Customer
from app.models.event_log import EventType
from app.models.item import InventoryItem, ItemOwner, ItemStatus, ItemType, home_status
from app.models.product_model import ProductModel
from app.models.repair import Repair, RepairOnItem, RepairOutcome, RepairStatus
from app.models.sale import SaleStatus
from app.models.user import User
from app.schemas.repair import RepairItemCreate, RepairItemReturn
from app.services.audit import log_event
from app.services.lookup import get_or_404, lock_items
from app.services.returns import select_open_links
from app.services.transitions import (
    Operation,
    apply_transition,
    check_transition,
    count_outstanding,
    derive_return_status,
)

logger = logging.getLogger(__name__)


def belongs_to_customer(item: InventoryItem) -> bool:
    """True for customer-owned units and for units of a sale that still stands."""
    if item.owner_type == ItemOwner.CUSTOMER.value:
        return True
    return item.sale is not None and item.sale.status == SaleStatus.COMPLETED.value


def resolve_repair_return_status(item: InventoryItem, outcome: RepairOutcome) -> ItemStatus:
    """Status an item takes when it comes back from repair with ``outcome``."""
    if belongs_to_customer(item):
        return ItemStatus.RETURNED_TO_CUSTOMER
    if outcome == RepairOutcome.REPAIRED_SUCCESSFULLY:
        return home_status(item.item_type)
    return ItemStatus.DECOMMISSIONED


class RepairService:

    def __init__(self, db: Session):
        self.db = db

    def list_repairs(self, skip: int = 0, limit: int = 100, status: Optional[str] = None) -> List[Repair]:
        query = self.db.query(Repair)
        if status:
            query = query.filter(Repair.status == status)
        return query.order_by(Repair.repair_date.desc(), Repair.id.desc()).offset(skip).limit(limit).all()

    def get_repair(self, repair_id: int) -> Repair:
        return get_or_404(self.db, Repair, repair_id, "Repair order")

    def create_repair(
        self,
        sender_id: int,
        receiver_id: int,
        items: List[RepairItemCreate],
        actor: User,
        customer_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Repair:
        """Open a repair order for existing items and/or new customer units.

        Company items go through REPAIR_INTAKE, customer units already on
        record (previously sold) through CUSTOMER_REPAIR_INTAKE, and customer
        units unknown to the system are registered on the fly as
        customer-owned items already REPAIRING.
        """
        if not items:
            raise InvalidInputError("At least one item is required.")
        ids = [entry.id for entry in items if entry.id is not None]
        if len(set(ids)) != len(ids):
            raise InvalidInputError("Each item can only be sent once per repair order.")

        with transaction(self.db):
            sender = get_or_404(self.db, Address, sender_id, "Sender address")
            receiver = get_or_404(self.db, Address, receiver_id, "Receiver address")
            customer = get_or_404(self.db, Customer, customer_id, "Customer") if customer_id else None

            known, unknown = [], []
            for entry in items:
                if entry.id is not None:
                    known.append(entry)
                elif not entry.is_customer_item:
                    raise InvalidInputError("id is required for company items.")
                elif entry.product_model_id is None:
                    raise InvalidInputError("product_model_id is required for new customer items.")
                else:
                    unknown.append(entry)

            intake = []
            if known:
                locked = lock_items(self.db, [entry.id for entry in known])
                by_id = {item.id: item for item in locked}
                for entry in known:
                    item = by_id[entry.id]
                    operation = (
                        Operation.CUSTOMER_REPAIR_INTAKE if entry.is_customer_item else Operation.REPAIR_INTAKE
                    )
                    check_transition(item, operation)
                    intake.append((item, operation))

            repair = Repair(
                sender_id=sender.id,
                receiver_id=receiver.id,
                customer_id=customer.id if customer else None,
                created_by_id=actor.id,
                notes=notes,
                status=RepairStatus.REPAIRING.value,
            )
            self.db.add(repair)
            self.db.flush()

            for item, operation in intake:
                rule = apply_transition(item, operation)
                self._link(repair, item, receiver, actor, rule.event_type)

            for entry in unknown:
                get_or_404(self.db, ProductModel, entry.product_model_id, "Product model")
                item = InventoryItem(
                    item_type=ItemType.SALE.value,
                    owner_type=ItemOwner.CUSTOMER.value,
                    status=ItemStatus.REPAIRING.value,
                    product_model_id=entry.product_model_id,
                    serial_number=entry.serial_number or None,
                    added_by_id=actor.id,
                )
                self.db.add(item)
                self.db.flush()
                log_event(
                    self.db, item.id, actor.id, EventType.CREATE,
                    f"Customer item registered for repair with S/N: {item.serial_number or 'N/A'}.",
                    repair_id=repair.id,
                )
                self._link(repair, item, receiver, actor, EventType.REPAIR_SENT)

        self.db.refresh(repair)
        logger.info(
            f"Repair {repair.id} created by user {actor.id}: "
            f"{len(intake)} existing items, {len(unknown)} new customer items"
        )
        return repair

    def _link(self, repair: Repair, item: InventoryItem, receiver: Address, actor: User, event_type: EventType):
        self.db.add(RepairOnItem(repair_id=repair.id, inventory_item_id=item.id))
        log_event(
            self.db, item.id, actor.id, event_type,
            f"Sent to {receiver.name} for repair.",
            repair_id=repair.id, receiver_name=receiver.name,
        )

    def return_items(self, repair_id: int, returns: List[RepairItemReturn], actor: User) -> Repair:
        """Record the outcome of returned items, then re-derive the repair status."""
        if not returns:
            raise InvalidInputError("At least one item to return is required.")
        ids = [entry.inventory_item_id for entry in returns]
        if len(set(ids)) != len(ids):
            raise InvalidInputError("Each item can only be returned once per request.")

        with transaction(self.db):
            repair = get_or_404(self.db, Repair, repair_id, "Repair order")
            if repair.status == RepairStatus.COMPLETED.value:
                raise StatusConflictError(
                    "All items of this repair order have already been returned.",
                    current_status=repair.status,
                    allowed=[RepairStatus.REPAIRING.value, RepairStatus.PARTIALLY_RETURNED.value],
                )

            links = select_open_links(repair, ids)
            items = {item.id: item for item in lock_items(self.db, ids)}
            for item in items.values():
                check_transition(item, Operation.REPAIR_RETURN)

            now = datetime.now(timezone.utc)
            receiver_name = repair.receiver.name
            for entry in returns:
                item = items[entry.inventory_item_id]
                outcome = RepairOutcome(entry.repair_outcome)
                new_status = resolve_repair_return_status(item, outcome)

                link = links[item.id]
                link.returned_at = now
                link.repair_outcome = outcome.value

                rule = apply_transition(item, Operation.REPAIR_RETURN, target=new_status)
                log_event(
                    self.db, item.id, actor.id, rule.event_type,
                    f"Returned from {receiver_name} (Outcome: {outcome.value}).",
                    repair_id=repair.id, repair_outcome=outcome.value, new_status=new_status.value,
                )

            outstanding = count_outstanding(self.db, RepairOnItem, RepairOnItem.repair_id, repair.id)
            repair.status = derive_return_status(
                outstanding, RepairStatus.COMPLETED, RepairStatus.PARTIALLY_RETURNED
            ).value

        self.db.refresh(repair)
        logger.info(f"Repair {repair.id}: {len(returns)} items returned, status {repair.status}")
        return repair
