"""
workload_service.py — Database-backed workload figures

Per-user counters for the workload endpoint and the team-wide analytics
view. Status buckets match the board engine (assignments/workload.py):
pending = PENDING/ASSIGNED/IN_PROGRESS, completed = COSTED/APPROVED/QUOTED,
total = every assigned item.

Called by: routers/workload.py
Depends on: models, constants
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from ..constants import ASSIGNABLE_ROLES, COMPLETED_STATUSES, PENDING_STATUSES
from ..models import InquiryItem, User


def user_workload(db: Session, user_id: int) -> dict:
    pending, completed, total = db.query(
        func.coalesce(func.sum(case((InquiryItem.status.in_(PENDING_STATUSES), 1), else_=0)), 0),
        func.coalesce(func.sum(case((InquiryItem.status.in_(COMPLETED_STATUSES), 1), else_=0)), 0),
        func.count(InquiryItem.id),
    ).filter(InquiryItem.assigned_to_id == user_id).one()

    return {
        "user_id": user_id,
        "pending_items": int(pending),
        "completed_items": int(completed),
        "total_items": int(total),
        "workload_percentage": round(completed / total * 100) if total else 0,
    }


def workload_analytics(db: Session, time_range: int = 30) -> dict:
    """Active item counts per VP/VPP user, items by status, and recent intake."""
    users = (
        db.query(User)
        .filter(User.role.in_(ASSIGNABLE_ROLES), User.is_active.is_(True))
        .order_by(User.name)
        .all()
    )
    active_counts = dict(
        db.query(InquiryItem.assigned_to_id, func.count(InquiryItem.id))
        .filter(
            InquiryItem.assigned_to_id.in_([u.id for u in users]),
            InquiryItem.status.in_(PENDING_STATUSES),
        )
        .group_by(InquiryItem.assigned_to_id)
        .all()
    )
    by_status = (
        db.query(InquiryItem.status, func.count(InquiryItem.id))
        .group_by(InquiryItem.status)
        .order_by(InquiryItem.status)
        .all()
    )
    since = datetime.now(timezone.utc) - timedelta(days=time_range)
    created_in_range = db.query(func.count(InquiryItem.id)).filter(InquiryItem.created_at >= since).scalar()

    return {
        "vp_workload": [
            {
                "id": u.id,
                "name": u.name,
                "email": u.email,
                "role": u.role,
                "active_items": active_counts.get(u.id, 0),
            }
            for u in users
        ],
        "items_by_status": [{"status": status, "count": count} for status, count in by_status],
        "total_items": sum(count for _, count in by_status),
        "time_range": time_range,
        "created_in_range": created_in_range or 0,
    }
