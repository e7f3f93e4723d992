"""
items.py — Inquiry Items & Assignment Router

List inquiry items for the assignment board and move them between
assignees in bulk.

Business Rules:
- Any authenticated user may list items; VP users only see their own
- status filter accepts a single value or a comma-separated list; unknown
  statuses are a 400
- Assign/unassign require VPP, ADMIN or SUPERUSER
- Assign/unassign are rate limited separately from the default limit
- Validation rules for assignment live in services/assignment_service.py

Called by: main.py (router mount)
Depends on: services/item_store_service, services/assignment_service, schemas
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from loguru import logger
from sqlalchemy.orm import Session

from ..config import settings
from ..constants import ITEM_STATUSES
from ..database import get_db
from ..dependencies import require_assigner, require_user
from ..models import InquiryItem, User
from ..rate_limit import limiter
from ..schemas.assignments import AssignOut, BulkAssignIn, UnassignIn
from ..schemas.items import ItemListResponse, ItemOut
from ..services.assignment_service import AssignmentError, bulk_assign, unassign
from ..services.item_store_service import item_query, list_items

router = APIRouter(tags=["items"])


def _raise(e: AssignmentError):
    raise HTTPException(e.status_code, e.message, headers={"X-Error-Code": e.code})


@router.get("/api/items", response_model=ItemListResponse)
def get_items(
    limit: int = Query(200, ge=1, le=500),
    offset: int = Query(0, ge=0),
    status: str = "",
    assigned_to_id: int | None = None,
    inquiry_id: int | None = None,
    search: str = "",
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """List items with inquiry, customer and assignee."""
    statuses = [s.strip() for s in status.split(",") if s.strip()]
    unknown = [s for s in statuses if s not in ITEM_STATUSES]
    if unknown:
        raise HTTPException(400, f"Unknown status: {', '.join(unknown)}")
    items, total = list_items(
        db,
        limit=limit,
        offset=offset,
        statuses=statuses,
        assigned_to_id=assigned_to_id,
        inquiry_id=inquiry_id,
        search=search,
        viewer=user,
    )
    return {"total": total, "limit": limit, "data": [ItemOut.model_validate(i) for i in items]}


@router.get("/api/items/{item_id}", response_model=ItemOut)
def get_item(item_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    item = item_query(db).filter(InquiryItem.id == item_id).first()
    if not item or (user.role == "VP" and item.assigned_to_id != user.id):
        raise HTTPException(404, "Item not found")
    return ItemOut.model_validate(item)


@router.post("/api/items/assign", response_model=AssignOut)
@limiter.limit(settings.rate_limit_assign)
def assign_items(
    payload: BulkAssignIn,
    request: Request,
    user: User = Depends(require_assigner),
    db: Session = Depends(get_db),
):
    """Assign items to a VP/VPP user for cost calculation."""
    try:
        items = bulk_assign(db, payload.item_ids, payload.assignee_id, user)
    except AssignmentError as e:
        logger.info("Assign rejected: {}", e.message)
        _raise(e)

    assignee_name = items[0].assigned_to.name if items and items[0].assigned_to else ""
    return {
        "success": True,
        "updated_count": len(items),
        "message": f"Successfully assigned {len(items)} items to {assignee_name}",
        "data": [ItemOut.model_validate(i).model_dump(mode="json") for i in items],
    }


@router.post("/api/items/unassign", response_model=AssignOut)
@limiter.limit(settings.rate_limit_assign)
def unassign_items(
    payload: UnassignIn,
    request: Request,
    user: User = Depends(require_assigner),
    db: Session = Depends(get_db),
):
    """Remove the assignee from items and reset them to PENDING."""
    try:
        count = unassign(db, payload.item_ids, user)
    except AssignmentError as e:
        _raise(e)
    return {
        "success": True,
        "updated_count": count,
        "message": f"Successfully unassigned {count} item(s)",
    }
