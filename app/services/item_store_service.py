"""
item_store_service.py — List queries for the board, and the in-process item store

The list functions back the REST endpoints in routers/. DbItemStore wraps
them (plus assignment_service) behind the ItemStore contract so the board
engine can run inside the server against a live session.

Business Rules:
- Items come newest first, with inquiry, customer, assignee and cost record
- VP users only ever see items assigned to themselves
- search matches item name, item description or inquiry title (ILIKE)
- list_users accepts any subset of roles; empty means all roles
- DbItemStore turns AssignmentError into ItemStoreError with the same code

Called by: routers/items.py, routers/directory.py, routers/assignments.py
Depends on: models, schemas/items, services/assignment_service, connectors/item_store
"""

from typing import Iterable

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from ..connectors.item_store import ItemStore, ItemStoreError
from ..models import Customer, Inquiry, InquiryItem, User
from ..schemas.items import CustomerOut, InquiryOut, ItemOut, UserOut
from .assignment_service import AssignmentError, bulk_assign, unassign


def item_query(db: Session):
    return db.query(InquiryItem).options(
        joinedload(InquiryItem.inquiry).joinedload(Inquiry.customer),
        joinedload(InquiryItem.assigned_to),
        joinedload(InquiryItem.cost_calculation),
    )


def list_items(
    db: Session,
    limit: int = 200,
    offset: int = 0,
    statuses: list[str] | None = None,
    assigned_to_id: int | None = None,
    inquiry_id: int | None = None,
    search: str = "",
    viewer: User | None = None,
) -> tuple[list[InquiryItem], int]:
    """Return (page of items, total matching)."""
    q = item_query(db)
    if viewer is not None and viewer.role == "VP":
        q = q.filter(InquiryItem.assigned_to_id == viewer.id)
    if statuses:
        q = q.filter(InquiryItem.status.in_(statuses))
    if assigned_to_id is not None:
        q = q.filter(InquiryItem.assigned_to_id == assigned_to_id)
    if inquiry_id is not None:
        q = q.filter(InquiryItem.inquiry_id == inquiry_id)
    search = (search or "").strip()
    if search:
        pattern = f"%{search}%"
        q = q.join(InquiryItem.inquiry).filter(
            or_(
                InquiryItem.name.ilike(pattern),
                InquiryItem.description.ilike(pattern),
                Inquiry.title.ilike(pattern),
            )
        )

    total = q.order_by(None).count()
    items = q.order_by(InquiryItem.created_at.desc(), InquiryItem.id.desc()).offset(offset).limit(limit).all()
    return items, total


def list_users(db: Session, roles: Iterable[str] = (), active: bool | None = None) -> list[User]:
    q = db.query(User)
    roles = [r for r in roles if r]
    if roles:
        q = q.filter(User.role.in_(roles))
    if active is not None:
        q = q.filter(User.is_active.is_(active))
    return q.order_by(User.name, User.id).all()


def list_customers(db: Session, active: bool | None = None, limit: int = 100) -> list[Customer]:
    q = db.query(Customer)
    if active is not None:
        q = q.filter(Customer.is_active.is_(active))
    return q.order_by(Customer.name, Customer.id).limit(limit).all()


def list_inquiries(db: Session, limit: int = 100) -> list[InquiryOut]:
    """Inquiries newest first, each with its item count."""
    item_count = (
        db.query(func.count(InquiryItem.id))
        .filter(InquiryItem.inquiry_id == Inquiry.id)
        .correlate(Inquiry)
        .scalar_subquery()
    )
    rows = (
        db.query(Inquiry, item_count)
        .options(joinedload(Inquiry.customer))
        .order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
        .limit(limit)
        .all()
    )
    return [
        InquiryOut.model_validate(inquiry).model_copy(update={"item_count": count or 0})
        for inquiry, count in rows
    ]


class DbItemStore(ItemStore):
    """ItemStore over a live SQLAlchemy session, acting as `user`."""

    def __init__(self, db: Session, user: User):
        self.db = db
        self.user = user

    async def list_items(self, limit: int = 200) -> list[ItemOut]:
        items, _ = list_items(self.db, limit=limit, viewer=self.user)
        return [ItemOut.model_validate(i) for i in items]

    async def list_users(self, roles: Iterable[str] = (), active_only: bool = True) -> list[UserOut]:
        users = list_users(self.db, roles=roles, active=True if active_only else None)
        return [UserOut.model_validate(u) for u in users]

    async def list_customers(self, active_only: bool = True, limit: int = 100) -> list[CustomerOut]:
        customers = list_customers(self.db, active=True if active_only else None, limit=limit)
        return [CustomerOut.model_validate(c) for c in customers]

    async def list_inquiries(self, limit: int = 100) -> list[InquiryOut]:
        return list_inquiries(self.db, limit=limit)

    async def assign_items(self, item_ids: list, assignee_id) -> dict:
        try:
            items = bulk_assign(self.db, [int(i) for i in item_ids], int(assignee_id), self.user)
        except AssignmentError as e:
            raise ItemStoreError(e.code, e.message, e.status_code) from e
        return {"success": True, "updated_count": len(items)}

    async def unassign_items(self, item_ids: list) -> dict:
        try:
            count = unassign(self.db, [int(i) for i in item_ids], self.user)
        except AssignmentError as e:
            raise ItemStoreError(e.code, e.message, e.status_code) from e
        return {"success": True, "updated_count": count}
