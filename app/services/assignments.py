"""Asset assignments - handing company assets to employees and taking them back."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.database import transaction
from app.exceptions import InvalidInputError, StatusConflictError
from app.models.assignment import AssetAssignment, AssetAssignmentOnItem, AssignmentStatus
from app.models.item import ItemType
from app.models.user import User
from app.services.audit import log_event
from app.services.lookup import get_or_404, lock_items
from app.services.returns import close_links
from app.services.transitions import Operation, apply_transition, check_transition, derive_return_status

logger = logging.getLogger(__name__)


class AssignmentService:

    def __init__(self, db: Session):
        self.db = db

    def list_assignments(
        self, skip: int = 0, limit: int = 100, status: Optional[str] = None
    ) -> List[AssetAssignment]:
        query = self.db.query(AssetAssignment)
        if status:
            query = query.filter(AssetAssignment.status == status)
        return (
            query.order_by(AssetAssignment.assigned_date.desc(), AssetAssignment.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_assignment(self, assignment_id: int) -> AssetAssignment:
        return get_or_404(self.db, AssetAssignment, assignment_id, "Assignment record")

    def create_assignment(
        self,
        assignee_id: int,
        item_ids: List[int],
        actor: User,
        notes: Optional[str] = None,
    ) -> AssetAssignment:
        """Assign IN_WAREHOUSE assets to an active user."""
        with transaction(self.db):
            items = lock_items(self.db, item_ids, ItemType.ASSET)
            for item in items:
                check_transition(item, Operation.ASSIGN)

            assignee = get_or_404(self.db, User, assignee_id, "Assignee")
            if not assignee.is_active:
                raise InvalidInputError("Assets can only be assigned to active users.")

            assignment = AssetAssignment(
                assignee_id=assignee.id,
                approved_by_id=actor.id,
                notes=notes,
                status=AssignmentStatus.ASSIGNED.value,
            )
            self.db.add(assignment)
            self.db.flush()

            assignee_name = assignee.display_name
            for item in items:
                self.db.add(AssetAssignmentOnItem(assignment_id=assignment.id, inventory_item_id=item.id))
                rule = apply_transition(item, Operation.ASSIGN)
                log_event(
                    self.db, item.id, actor.id, rule.event_type,
                    f"Asset assigned to {assignee_name}.",
                    assignment_id=assignment.id, assignee_id=assignee.id,
                )

        self.db.refresh(assignment)
        logger.info(f"Assignment {assignment.id} created by user {actor.id}: {len(items)} assets")
        return assignment

    def return_items(self, assignment_id: int, item_ids: List[int], actor: User) -> AssetAssignment:
        """Take back some or all assigned assets, then re-derive the assignment status."""
        with transaction(self.db):
            assignment = get_or_404(self.db, AssetAssignment, assignment_id, "Assignment record")
            if assignment.status == AssignmentStatus.RETURNED.value:
                raise StatusConflictError(
                    "All assets of this assignment have already been returned.",
                    current_status=assignment.status,
                    allowed=[AssignmentStatus.ASSIGNED.value, AssignmentStatus.PARTIALLY_RETURNED.value],
                )

            assignee = assignment.assignee
            outstanding, returned_at = close_links(
                self.db, assignment, AssetAssignmentOnItem, AssetAssignmentOnItem.assignment_id,
                item_ids, Operation.RETURN_ASSIGNED, actor,
                f"Asset returned from {assignee.display_name}.",
                assignment_id=assignment.id,
            )

            assignment.status = derive_return_status(
                outstanding, AssignmentStatus.RETURNED, AssignmentStatus.PARTIALLY_RETURNED
            ).value
            assignment.return_date = returned_at if outstanding == 0 else None

        self.db.refresh(assignment)
        logger.info(f"Assignment {assignment.id}: {len(set(item_ids))} assets returned, status {assignment.status}")
        return assignment
