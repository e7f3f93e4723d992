"""
rate_limit.py — Shared slowapi limiter

Business Rules:
- Requests carrying X-Agent-Key are limited per key (hashed), everything
  else per client IP, so the board CLI and browser users don't share a bucket
- Storage is Redis when CACHE_BACKEND=redis and it answers a ping at
  import; otherwise memory:// (limits then apply per worker)
- Disabled entirely under TESTING or RATE_LIMIT_ENABLED=false

Called by: main.py (app.state.limiter), routers/items.py, routers/assignments.py
Depends on: config
"""

import hashlib
import os

from loguru import logger
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from .config import settings


def rate_limit_key(request: Request) -> str:
    agent_key = request.headers.get("x-agent-key")
    if agent_key:
        return "agent:" + hashlib.sha256(agent_key.encode()).hexdigest()[:16]
    return get_remote_address(request)


def _resolve_storage() -> str:
    if os.environ.get("TESTING") or settings.cache_backend != "redis" or not settings.redis_url:
        return "memory://"
    try:
        import redis as redis_lib

        redis_lib.from_url(settings.redis_url, socket_connect_timeout=2).ping()
    except Exception as e:
        logger.warning("Rate limiter falling back to memory storage, Redis unavailable: {}", e)
        return "memory://"
    logger.info("Rate limiter using Redis storage")
    return settings.redis_url


limiter = Limiter(
    key_func=rate_limit_key,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled and not os.environ.get("TESTING"),
    storage_uri=_resolve_storage(),
)
