"""
dependencies.py — Shared FastAPI Dependencies

Reusable dependency functions for authentication and authorization. All
routers import from here instead of defining their own auth logic.

Business Rules:
- get_user returns None if not logged in (non-throwing)
- require_user raises 401 if not logged in, 403 if deactivated
- A valid X-Agent-Key header authenticates as the configured agent user
- require_assigner raises 403 unless role is VPP, ADMIN or SUPERUSER
- require_workload_viewer raises 403 unless role is VPP, ADMIN or SUPERUSER

Called by: all routers
Depends on: models, database, config, constants
"""

import hmac
import logging

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .config import settings
from .constants import ASSIGNER_ROLES, WORKLOAD_VIEWER_ROLES
from .database import get_db
from .models import User

log = logging.getLogger(__name__)


# ── Authentication ────────────────────────────────────────────────────


def get_user(request: Request, db: Session) -> User | None:
    """Return current user from session, or None if not logged in."""
    uid = request.session.get("user_id") if "session" in request.scope else None
    if not uid:
        return None
    return db.get(User, uid)


def _agent_user(request: Request, db: Session) -> User | None:
    agent_key = request.headers.get("x-agent-key")
    if not agent_key or not settings.agent_api_key:
        return None
    if not hmac.compare_digest(agent_key, settings.agent_api_key):
        log.warning("Rejected X-Agent-Key from %s", request.client.host if request.client else "?")
        return None
    return db.query(User).filter_by(email=settings.agent_email).first()


def require_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Dependency: raises 401 if no authenticated user, 403 if deactivated."""
    user = get_user(request, db) or _agent_user(request, db)
    if not user:
        raise HTTPException(401, "Unauthorized")
    if not user.is_active:
        if "session" in request.scope:
            request.session.clear()
        raise HTTPException(403, "Account deactivated, contact an admin")
    return user


def require_assigner(user: User = Depends(require_user)) -> User:
    """Dependency: user may assign and unassign items."""
    if user.role not in ASSIGNER_ROLES:
        raise HTTPException(403, "Forbidden: Insufficient permissions")
    return user


def require_workload_viewer(user: User = Depends(require_user)) -> User:
    """Dependency: user may view team-wide workload analytics."""
    if user.role not in WORKLOAD_VIEWER_ROLES:
        raise HTTPException(403, "Forbidden")
    return user
