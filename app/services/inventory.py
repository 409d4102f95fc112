"""Inventory items and assets - registration, edits, deletion and direct status actions."""
import logging
import re
from typing import List, Optional, Union

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.database import transaction
from app.exceptions import InvalidInputError, RecordInUseError, RecordNotFoundError
from app.models.assignment import AssetAssignmentOnItem
from app.models.borrowing import BorrowingOnItem
from app.models.event_log import EventLog, EventType
from app.models.item import InventoryItem, ItemOwner, ItemStatus, ItemType
from app.models.product_model import ProductModel
from app.models.repair import RepairOnItem
from app.models.supplier import Supplier
from app.models.user import User
from app.schemas.item import AssetCreate, AssetUpdate, ItemBatchCreate, ItemCreate, ItemUpdate
from app.services.audit import log_event
from app.services.lookup import get_or_404
from app.services.transitions import Operation, apply_transition

logger = logging.getLogger(__name__)

MAC_PATTERN = re.compile(r"^([0-9A-Fa-f]{2}[:-]){5}([0-9A-Fa-f]{2})$")

# Audit text for the direct status actions
STATUS_ACTION_DETAILS = {
    Operation.RESERVE: "Item marked as reserved.",
    Operation.UNRESERVE: "Item unreserved and returned to stock.",
    Operation.MARK_DEFECTIVE: "Item marked as defective.",
    Operation.RESTORE: "Item returned to service from defective status.",
    Operation.DECOMMISSION: "Item decommissioned.",
    Operation.REINSTATE: "Item reinstated.",
}

LABELS = {ItemType.SALE: "Inventory item", ItemType.ASSET: "Asset"}


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class InventoryService:

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_items(
        self,
        item_type: ItemType,
        skip: int = 0,
        limit: int = 100,
        status: Optional[str] = None,
        product_model_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[InventoryItem]:
        query = self.db.query(InventoryItem).filter(InventoryItem.item_type == item_type.value)

        if status:
            query = query.filter(InventoryItem.status == status)
        if product_model_id:
            query = query.filter(InventoryItem.product_model_id == product_model_id)
        if search:
            search_term = f"%{search}%"
            query = query.join(InventoryItem.product_model).filter(
                or_(
                    InventoryItem.serial_number.ilike(search_term),
                    InventoryItem.mac_address.ilike(search_term),
                    InventoryItem.asset_code.ilike(search_term),
                    ProductModel.model_number.ilike(search_term),
                )
            )

        return query.order_by(InventoryItem.id.desc()).offset(skip).limit(limit).all()

    def get_item(self, item_id: int, item_type: Optional[ItemType] = None) -> InventoryItem:
        item = self.db.get(InventoryItem, item_id)
        if item is None or (item_type is not None and item.item_type != item_type.value):
            raise RecordNotFoundError(f"{LABELS.get(item_type, 'Item')} not found.")
        return item

    def get_history(self, item_id: int):
        """The item and its audit entries, newest first."""
        item = self.get_item(item_id)
        events = (
            self.db.query(EventLog)
            .filter(EventLog.inventory_item_id == item.id)
            .order_by(EventLog.created_at.desc(), EventLog.id.desc())
            .all()
        )
        return item, events

    def has_history(self, item: InventoryItem) -> bool:
        """True if the item ever took part in a sale, borrowing, assignment or repair."""
        if item.sale_id is not None:
            return True
        for link_model in (BorrowingOnItem, AssetAssignmentOnItem, RepairOnItem):
            count = (
                self.db.query(link_model)
                .filter(link_model.inventory_item_id == item.id)
                .count()
            )
            if count:
                return True
        return False

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _product_model(self, product_model_id: int) -> ProductModel:
        return get_or_404(self.db, ProductModel, product_model_id, "Product model")

    def _check_identifiers(self, product_model: ProductModel, serial_number, mac_address):
        category = product_model.category
        if category.requires_serial_number and not serial_number:
            raise InvalidInputError("Serial Number is required for this category.")
        if category.requires_mac_address and not mac_address:
            raise InvalidInputError("MAC Address is required for this category.")
        if mac_address and not MAC_PATTERN.match(mac_address):
            raise InvalidInputError(f"Invalid MAC Address format: {mac_address}")

    def _ensure_unique(self, field: str, value: Optional[str], exclude_id: Optional[int] = None):
        if not value:
            return
        column = getattr(InventoryItem, field)
        query = self.db.query(InventoryItem).filter(column == value)
        if exclude_id is not None:
            query = query.filter(InventoryItem.id != exclude_id)
        if query.first():
            raise InvalidInputError(f"The following fields must be unique: {field}. '{value}' is already in use.")

    def _new_item(self, actor: User, item_type: ItemType, details: str, **fields) -> InventoryItem:
        for field in ("serial_number", "mac_address", "asset_code"):
            self._ensure_unique(field, fields.get(field))

        item = InventoryItem(
            item_type=item_type.value,
            owner_type=ItemOwner.COMPANY.value,
            status=(ItemStatus.IN_WAREHOUSE if item_type == ItemType.ASSET else ItemStatus.IN_STOCK).value,
            added_by_id=actor.id,
            **fields
        )
        self.db.add(item)
        self.db.flush()
        log_event(self.db, item.id, actor.id, EventType.CREATE, details)
        return item

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_item(self, data: ItemCreate, actor: User) -> InventoryItem:
        """Register one sale item, IN_STOCK."""
        serial_number = _blank_to_none(data.serial_number)
        mac_address = _blank_to_none(data.mac_address)

        with transaction(self.db):
            product_model = self._product_model(data.product_model_id)
            get_or_404(self.db, Supplier, data.supplier_id, "Supplier")
            self._check_identifiers(product_model, serial_number, mac_address)
            item = self._new_item(
                actor, ItemType.SALE,
                f"Item created with S/N: {serial_number or 'N/A'}.",
                serial_number=serial_number,
                mac_address=mac_address,
                product_model_id=product_model.id,
                supplier_id=data.supplier_id,
                notes=data.notes,
            )

        self.db.refresh(item)
        logger.info(f"Inventory item {item.id} added by user {actor.id}")
        return item

    def add_items_batch(self, data: ItemBatchCreate, actor: User) -> List[InventoryItem]:
        """Register several units of one product model from one supplier, all or none."""
        if not data.items:
            raise InvalidInputError("Items list cannot be empty.")

        created = []
        with transaction(self.db):
            product_model = self._product_model(data.product_model_id)
            get_or_404(self.db, Supplier, data.supplier_id, "Supplier")
            for entry in data.items:
                serial_number = _blank_to_none(entry.serial_number)
                mac_address = _blank_to_none(entry.mac_address)
                self._check_identifiers(product_model, serial_number, mac_address)
                created.append(self._new_item(
                    actor, ItemType.SALE,
                    f"Item created in batch with S/N: {serial_number or 'N/A'}.",
                    serial_number=serial_number,
                    mac_address=mac_address,
                    product_model_id=product_model.id,
                    supplier_id=data.supplier_id,
                ))

        for item in created:
            self.db.refresh(item)
        logger.info(f"{len(created)} inventory items added in batch by user {actor.id}")
        return created

    def add_asset(self, data: AssetCreate, actor: User) -> InventoryItem:
        """Register one company asset, IN_WAREHOUSE."""
        asset_code = _blank_to_none(data.asset_code)
        if not asset_code:
            raise InvalidInputError("Asset Code is required.")
        serial_number = _blank_to_none(data.serial_number)
        mac_address = _blank_to_none(data.mac_address)

        with transaction(self.db):
            product_model = self._product_model(data.product_model_id)
            if data.supplier_id is not None:
                get_or_404(self.db, Supplier, data.supplier_id, "Supplier")
            self._check_identifiers(product_model, serial_number, mac_address)
            item = self._new_item(
                actor, ItemType.ASSET,
                f"Asset created with code: {asset_code}.",
                asset_code=asset_code,
                serial_number=serial_number,
                mac_address=mac_address,
                product_model_id=product_model.id,
                supplier_id=data.supplier_id,
                notes=data.notes,
            )

        self.db.refresh(item)
        logger.info(f"Asset {item.id} ({asset_code}) added by user {actor.id}")
        return item

    def update_item(
        self,
        item_id: int,
        data: Union[ItemUpdate, AssetUpdate],
        actor: User,
        item_type: ItemType,
    ) -> InventoryItem:
        """Edit identifying attributes. Status is never edited here."""
        update_data = data.model_dump(exclude_unset=True)
        for field in ("serial_number", "mac_address", "asset_code"):
            if field in update_data:
                update_data[field] = _blank_to_none(update_data[field])
        if item_type == ItemType.ASSET and "asset_code" in update_data and not update_data["asset_code"]:
            raise InvalidInputError("Asset Code is required.")

        with transaction(self.db):
            item = self.get_item(item_id, item_type)

            product_model = item.product_model
            if update_data.get("product_model_id") is not None:
                product_model = self._product_model(update_data["product_model_id"])
            if update_data.get("supplier_id") is not None:
                get_or_404(self.db, Supplier, update_data["supplier_id"], "Supplier")

            serial_number = update_data.get("serial_number", item.serial_number)
            mac_address = update_data.get("mac_address", item.mac_address)
            self._check_identifiers(product_model, serial_number, mac_address)
            for field in ("serial_number", "mac_address", "asset_code"):
                if field in update_data:
                    self._ensure_unique(field, update_data[field], exclude_id=item.id)

            for field, value in update_data.items():
                setattr(item, field, value)
            log_event(
                self.db, item.id, actor.id, EventType.UPDATE,
                "Item details updated.",
                fields=sorted(update_data),
            )

        self.db.refresh(item)
        return item

    def delete_item(self, item_id: int, item_type: ItemType) -> None:
        """Delete an item that never took part in any transaction."""
        with transaction(self.db):
            item = self.get_item(item_id, item_type)
            if self.has_history(item):
                raise RecordInUseError(
                    "Cannot delete item. It has transaction history and must be decommissioned instead."
                )
            self.db.delete(item)
        logger.info(f"{item_type.value} item {item_id} deleted")

    def change_status(
        self,
        item_id: int,
        operation: Operation,
        actor: User,
        item_type: ItemType,
    ) -> InventoryItem:
        """Run one of the direct admin status actions through the transition table."""
        with transaction(self.db):
            item = self.get_item(item_id, item_type)
            previous = item.status
            rule = apply_transition(item, operation)
            log_event(
                self.db, item.id, actor.id, rule.event_type,
                STATUS_ACTION_DETAILS.get(operation, f"Status changed from {previous} to {item.status}."),
                from_status=previous, to_status=item.status,
            )

        self.db.refresh(item)
        logger.info(f"Item {item.id}: {previous} -> {item.status} ({operation.value}) by user {actor.id}")
        return item
