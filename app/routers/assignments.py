"""
assignments.py — Assignment Board Router

Runs the board engine in-process (DbItemStore) for callers that want the
composed read model instead of the raw lists.

Business Rules:
- GET builds a fresh board, loads it, applies query filters, returns snapshot
- A failed load still returns 200 with the error in `notices`
- POST assigns (user_id set) or unassigns (user_id null) through the
  executor; `ok` reports the outcome, `notices` what the user should see
- Mutations need VPP, ADMIN or SUPERUSER

Called by: main.py (router mount)
Depends on: assignments/*, services/item_store_service
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..assignments import AssignmentsData
from ..config import settings
from ..database import get_db
from ..dependencies import require_assigner, require_user
from ..models import User
from ..rate_limit import limiter
from ..schemas.assignments import BoardAssignIn
from ..schemas.responses import BoardAssignResponse
from ..services.item_store_service import DbItemStore

router = APIRouter(tags=["assignments"])


@router.get("/api/assignments/board")
async def get_board(
    search: str = "",
    customer_id: str = "",
    inquiry_id: str = "",
    priority: str = "",
    status: str = "",
    assigned_to_id: str = "",
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    board = AssignmentsData(DbItemStore(db, user))
    await board.load()
    board.set_filters(
        search=search,
        customer_id=customer_id,
        inquiry_id=inquiry_id,
        priority=priority,
        status=status,
        assigned_to_id=assigned_to_id,
    )
    return board.snapshot()


@router.post("/api/assignments/board/assign", response_model=BoardAssignResponse)
@limiter.limit(settings.rate_limit_assign)
async def board_assign(
    payload: BoardAssignIn,
    request: Request,
    user: User = Depends(require_assigner),
    db: Session = Depends(get_db),
):
    board = AssignmentsData(DbItemStore(db, user))
    await board.load()
    ok = await board.assign_items(payload.item_ids, payload.user_id)
    return {
        "ok": ok,
        "notices": [{"level": n.level, "message": n.message} for n in board.notifier.drain()],
    }
