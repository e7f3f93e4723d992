"""
workload.py — Workload Router

Per-user workload counters and the cached team workload analytics.

Business Rules:
- Any authenticated user may read a single user's workload
- Team analytics require VPP, ADMIN or SUPERUSER
- Team analytics are cached per time_range (5 minutes by default) and
  invalidated whenever items are assigned or unassigned

Called by: main.py (router mount)
Depends on: services/workload_service, cache/decorators
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..cache.decorators import cached_endpoint
from ..config import settings
from ..database import get_db
from ..dependencies import require_user, require_workload_viewer
from ..models import User
from ..schemas.assignments import WorkloadOut
from ..schemas.responses import WorkloadAnalyticsResponse
from ..services.assignment_service import WORKLOAD_CACHE_PREFIX
from ..services.workload_service import user_workload, workload_analytics

router = APIRouter(tags=["workload"])


@router.get("/api/workload/{user_id}", response_model=WorkloadOut)
def get_user_workload(user_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    if not db.get(User, user_id):
        raise HTTPException(404, "User not found")
    return user_workload(db, user_id)


@router.get("/api/analytics/workload", response_model=WorkloadAnalyticsResponse)
@cached_endpoint(
    prefix=WORKLOAD_CACHE_PREFIX,
    ttl_seconds=settings.workload_cache_ttl_seconds,
    key_params=["time_range"],
)
def get_workload_analytics(
    time_range: int = Query(30, ge=1, le=365),
    user: User = Depends(require_workload_viewer),
    db: Session = Depends(get_db),
):
    return workload_analytics(db, time_range=time_range)
