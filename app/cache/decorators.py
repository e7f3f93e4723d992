"""
cache/decorators.py — Endpoint caching decorator

Caches the JSON-ready return value of a sync endpoint in the cache backend
(Redis or memory), keyed by prefix plus a hash of selected parameters.

Business Rules:
- Only dict/list results are cached; Response objects pass straight through
- db, user and request never take part in the key
- invalidate_prefix() drops every entry of one endpoint at once; services
  call it after writes that change the cached figures

Usage:
    @cached_endpoint(prefix="analytics_workload", ttl_seconds=300, key_params=["time_range"])
    def get_workload_analytics(time_range, db, user):
        ...

Called by: routers/workload.py, services/assignment_service.py
Depends on: cache/backend.py
"""

import functools
import hashlib
import json
import logging

from .backend import clear_prefix, get_cached, set_cached

log = logging.getLogger("inquiry.cache")

_NEVER_KEYED = frozenset({"db", "user", "request"})


def cache_key_for(prefix: str, params: dict, key_params: list[str] | None = None) -> str:
    """Deterministic `prefix:<hash>` key for a call's keyword arguments."""
    if key_params is None:
        keyed = {k: v for k, v in params.items() if k not in _NEVER_KEYED}
    else:
        keyed = {k: params.get(k) for k in key_params}
    digest = hashlib.md5(
        json.dumps(keyed, sort_keys=True, default=str).encode(), usedforsecurity=False
    ).hexdigest()
    return f"{prefix}:{digest[:12]}"


def cached_endpoint(prefix: str, ttl_seconds: int = 300, key_params: list[str] | None = None):
    """Cache an endpoint's result for ttl_seconds.

    key_params lists the kwargs that make up the key; None means every
    kwarg except db, user and request.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            key = cache_key_for(prefix, kwargs, key_params)
            hit = get_cached(key)
            if hit is not None:
                log.debug("Cache HIT: %s", key)
                return hit

            log.debug("Cache MISS: %s", key)
            result = func(*args, **kwargs)
            if isinstance(result, (dict, list)):
                set_cached(key, result, ttl_seconds=ttl_seconds)
            return result

        wrapper.cache_prefix = prefix
        return wrapper

    return decorator


def invalidate_prefix(prefix: str) -> None:
    """Drop every entry cached under @cached_endpoint(prefix=...)."""
    removed = clear_prefix(f"{prefix}:")
    if removed:
        log.debug("Cache invalidated %d entries for %s", removed, prefix)
