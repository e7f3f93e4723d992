"""Cache backend — Redis primary with in-process memory fallback.

Used for: workload analytics (5-minute TTL) and any endpoint wrapped with
@cached_endpoint.

Redis is preferred so entries are shared across workers. When Redis is
disabled (CACHE_BACKEND=memory, TESTING) or unreachable at first use,
entries live in a per-process dict with the same TTL semantics.
Values are stored JSON-encoded in both backends, so callers always get a
fresh copy back.
"""

import json
import logging
import os
import time

log = logging.getLogger("inquiry.cache")

# Lazy-initialized Redis client
_redis_client = None
_redis_init_attempted = False
_REDIS_PREFIX = "inq:"

# key -> (expires_at monotonic or None, json payload)
_memory: dict = {}


def _get_redis():
    """Lazy-init Redis connection. Returns client or None if unavailable."""
    global _redis_client, _redis_init_attempted

    if _redis_init_attempted:
        return _redis_client

    _redis_init_attempted = True

    if os.environ.get("TESTING"):
        return None

    try:
        from app.config import settings

        if settings.cache_backend != "redis":
            log.info("Cache backend set to %s, skipping Redis", settings.cache_backend)
            return None

        import redis

        _redis_client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=3,
            socket_timeout=2,
            retry_on_timeout=True,
        )
        _redis_client.ping()
        log.info("Redis cache connected: %s", settings.redis_url)
    except Exception as e:
        log.warning("Redis unavailable, falling back to memory cache: %s", e)
        _redis_client = None

    return _redis_client


def _memory_get(cache_key: str):
    entry = _memory.get(cache_key)
    if entry is None:
        return None
    expires_at, payload = entry
    if expires_at is not None and expires_at <= time.monotonic():
        _memory.pop(cache_key, None)
        return None
    return payload


def get_cached(cache_key: str):
    """Return the cached value, or None on miss/expiry."""
    r = _get_redis()
    if r:
        try:
            data = r.get(f"{_REDIS_PREFIX}{cache_key}")
            return json.loads(data) if data else None
        except Exception as e:
            log.debug("Redis read error for %s: %s", cache_key, e)

    payload = _memory_get(cache_key)
    return json.loads(payload) if payload is not None else None


def set_cached(cache_key: str, data, ttl_seconds: int | None = None) -> None:
    """Store a JSON-serialisable value. ttl_seconds=None keeps it until deleted."""
    payload = json.dumps(data, default=str)

    r = _get_redis()
    if r:
        try:
            if ttl_seconds:
                r.setex(f"{_REDIS_PREFIX}{cache_key}", ttl_seconds, payload)
            else:
                r.set(f"{_REDIS_PREFIX}{cache_key}", payload)
            return
        except Exception as e:
            log.debug("Redis write error for %s: %s", cache_key, e)

    expires_at = time.monotonic() + ttl_seconds if ttl_seconds else None
    _memory[cache_key] = (expires_at, payload)


def exists(cache_key: str) -> bool:
    r = _get_redis()
    if r:
        try:
            return bool(r.exists(f"{_REDIS_PREFIX}{cache_key}"))
        except Exception as e:
            log.debug("Redis exists error for %s: %s", cache_key, e)
    return _memory_get(cache_key) is not None


def invalidate(cache_key: str) -> None:
    """Delete a specific cache entry from both backends."""
    r = _get_redis()
    if r:
        try:
            r.delete(f"{_REDIS_PREFIX}{cache_key}")
        except Exception as e:
            log.debug("Redis invalidate error for %s: %s", cache_key, e)
    _memory.pop(cache_key, None)


def clear_prefix(prefix: str) -> int:
    """Delete every entry whose key starts with `prefix`. Returns count removed."""
    count = 0

    r = _get_redis()
    if r:
        try:
            cursor = 0
            pattern = f"{_REDIS_PREFIX}{prefix}*"
            while True:
                cursor, keys = r.scan(cursor=cursor, match=pattern, count=100)
                if keys:
                    count += r.delete(*keys)
                if cursor == 0:
                    break
        except Exception as e:
            log.debug("Redis prefix clear error for %s: %s", prefix, e)

    for key in [k for k in _memory if k.startswith(prefix)]:
        del _memory[key]
        count += 1
    return count


def reset_memory_cache() -> None:
    """Drop every in-process entry. Used by tests."""
    _memory.clear()
