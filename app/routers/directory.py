"""
directory.py — Users, Customers, Inquiries & Identity Router

Read-only lists the assignment board loads alongside items.

Business Rules:
- roles is a comma-separated subset of constants.ROLES (e.g. "VP,VPP");
  anything else is a 400
- active=true/false filters on is_active; omitted means both
- /api/auth/me returns the caller (session or agent key)

Called by: main.py (router mount)
Depends on: services/item_store_service, schemas/items
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..constants import ROLES
from ..database import get_db
from ..dependencies import require_user
from ..models import User
from ..schemas.items import (
    CustomerListResponse,
    CustomerOut,
    InquiryListResponse,
    UserListResponse,
    UserOut,
)
from ..services.item_store_service import list_customers, list_inquiries, list_users

router = APIRouter(tags=["directory"])


def _parse_active(active: str | None) -> bool | None:
    if active is None or active == "":
        return None
    return active.strip().lower() == "true"


@router.get("/api/auth/me", response_model=UserOut)
def me(user: User = Depends(require_user)):
    return UserOut.model_validate(user)


@router.get("/api/users", response_model=UserListResponse)
def get_users(
    roles: str = "",
    active: str | None = None,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    role_list = [r.strip().upper() for r in roles.split(",") if r.strip()]
    unknown = [r for r in role_list if r not in ROLES]
    if unknown:
        raise HTTPException(400, f"Unknown role: {', '.join(unknown)}")
    users = list_users(db, roles=role_list, active=_parse_active(active))
    return {"data": [UserOut.model_validate(u) for u in users]}


@router.get("/api/customers", response_model=CustomerListResponse)
def get_customers(
    active: str | None = None,
    limit: int = Query(100, ge=1, le=500),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    customers = list_customers(db, active=_parse_active(active), limit=limit)
    return {"data": [CustomerOut.model_validate(c) for c in customers]}


@router.get("/api/inquiries", response_model=InquiryListResponse)
def get_inquiries(
    limit: int = Query(100, ge=1, le=500),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return {"data": list_inquiries(db, limit=limit)}
