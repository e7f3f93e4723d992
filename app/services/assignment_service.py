"""
assignment_service.py — Bulk item assignment and unassignment

Server side of the assign/unassign collaborator operations. Validates the
request against workflow state, applies it in one transaction, and leaves
an audit trail plus in-app notifications for the assignee.

Business Rules:
- Only VPP, ADMIN and SUPERUSER may assign or unassign
- Assignee must exist (404), be active (400) and be VP or VPP (400)
- Every item must exist and be PENDING or ASSIGNED (400)
- Every item's inquiry must be SUBMITTED or ASSIGNED (400)
- Assign: items -> assigned_to_id + status ASSIGNED; SUBMITTED inquiries
  -> ASSIGNED; one AuditLog per item; one Notification per inquiry
- Unassign: items -> assigned_to_id NULL + status PENDING; one AuditLog per item
- Either everything is written or nothing is (rollback on any failure)
- Workload analytics cache is invalidated after every successful change

Called by: routers/items.py, services/item_store_service.py
Depends on: models, constants, cache/decorators
"""

import logging

from sqlalchemy.orm import Session, joinedload

from ..cache.decorators import invalidate_prefix
from ..constants import (
    ASSIGNABLE_INQUIRY_STATUSES,
    ASSIGNABLE_ITEM_STATUSES,
    ASSIGNABLE_ROLES,
    ASSIGNER_ROLES,
)
from ..models import AuditLog, Inquiry, InquiryItem, Notification, User
from ..schemas.errors import FORBIDDEN, NOT_FOUND, VALIDATION

log = logging.getLogger("inquiry.assignments")

WORKLOAD_CACHE_PREFIX = "analytics_workload"


class AssignmentError(Exception):
    def __init__(self, status_code: int, message: str, code: str = VALIDATION):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


def can_assign(user: User) -> bool:
    return user is not None and user.role in ASSIGNER_ROLES


def _require_assigner(user: User) -> None:
    if not can_assign(user):
        raise AssignmentError(403, "Forbidden: Insufficient permissions", FORBIDDEN)


def _load_assignee(db: Session, assignee_id: int) -> User:
    assignee = db.get(User, assignee_id)
    if not assignee:
        raise AssignmentError(404, "Assignee not found", NOT_FOUND)
    if not assignee.is_active:
        raise AssignmentError(400, "Assignee is not active")
    if assignee.role not in ASSIGNABLE_ROLES:
        raise AssignmentError(400, "Can only assign items to VP or VPP users")
    return assignee


def bulk_assign(db: Session, item_ids: list[int], assignee_id: int, acting_user: User) -> list[InquiryItem]:
    """Assign every item in `item_ids` to `assignee_id`. Returns the updated items."""
    _require_assigner(acting_user)
    if not item_ids:
        raise AssignmentError(400, "At least one item must be selected")
    assignee = _load_assignee(db, assignee_id)

    items = (
        db.query(InquiryItem)
        .options(joinedload(InquiryItem.inquiry).joinedload(Inquiry.customer))
        .filter(
            InquiryItem.id.in_(item_ids),
            InquiryItem.status.in_(ASSIGNABLE_ITEM_STATUSES),
        )
        .all()
    )
    if len(items) != len(set(item_ids)):
        raise AssignmentError(400, "Some items not found or not assignable")
    if any(item.inquiry.status not in ASSIGNABLE_INQUIRY_STATUSES for item in items):
        raise AssignmentError(400, "Some items belong to inquiries that cannot be assigned")

    # Group by inquiry, first-seen order, for notifications
    by_inquiry: dict[int, list[InquiryItem]] = {}
    for item in items:
        by_inquiry.setdefault(item.inquiry_id, []).append(item)

    try:
        for item in items:
            item.assigned_to_id = assignee.id
            item.status = "ASSIGNED"
            db.add(
                AuditLog(
                    action="ASSIGN",
                    entity="InquiryItem",
                    entity_id=item.id,
                    new_data={
                        "assigned_to_id": assignee.id,
                        "assignee_name": assignee.name,
                        "status": "ASSIGNED",
                    },
                    user_id=acting_user.id,
                    inquiry_id=item.inquiry_id,
                )
            )

        for inquiry_items in by_inquiry.values():
            inquiry = inquiry_items[0].inquiry
            if inquiry.status == "SUBMITTED":
                inquiry.status = "ASSIGNED"
            db.add(
                Notification(
                    type="COST_CALCULATION_REQUESTED",
                    title="Items assigned for cost calculation",
                    message=(
                        f'{len(inquiry_items)} items from "{inquiry.title}" have been '
                        "assigned to you for cost calculation"
                    ),
                    user_id=assignee.id,
                    data={
                        "inquiry_id": inquiry.id,
                        "item_ids": [i.id for i in inquiry_items],
                        "item_count": len(inquiry_items),
                    },
                )
            )
        db.commit()
    except Exception:
        db.rollback()
        raise

    invalidate_prefix(WORKLOAD_CACHE_PREFIX)
    log.info(
        "Assigned %d item(s) to user %s (%s) by user %s",
        len(items), assignee.id, assignee.name, acting_user.id,
    )
    for item in items:
        db.refresh(item)
    return items


def unassign(db: Session, item_ids: list[int], acting_user: User) -> int:
    """Clear the assignee of every item in `item_ids` and reset it to PENDING.

    Returns the number of items updated; ids that don't exist are skipped.
    """
    _require_assigner(acting_user)
    if not item_ids:
        raise AssignmentError(400, "Invalid request: item_ids must be a non-empty list")

    items = db.query(InquiryItem).filter(InquiryItem.id.in_(item_ids)).all()
    try:
        for item in items:
            db.add(
                AuditLog(
                    action="UNASSIGN",
                    entity="InquiryItem",
                    entity_id=item.id,
                    new_data={
                        "previous_assigned_to_id": item.assigned_to_id,
                        "assigned_to_id": None,
                        "status": "PENDING",
                    },
                    user_id=acting_user.id,
                    inquiry_id=item.inquiry_id,
                )
            )
            item.assigned_to_id = None
            item.status = "PENDING"
        db.commit()
    except Exception:
        db.rollback()
        raise

    invalidate_prefix(WORKLOAD_CACHE_PREFIX)
    log.info("Unassigned %d item(s) by user %s", len(items), acting_user.id)
    return len(items)
