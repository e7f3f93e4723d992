"""
session_cache.py — Session-scoped TTL cache with in-flight de-duplication

Concurrent callers asking for the same key while a fetch is running share
that one fetch instead of issuing their own. Construct one per session and
pass it to whoever needs it; there is no module-level instance.

Business Rules:
- Values (None included) are served from memory until ttl_seconds elapse
- At most one fetch per key is in flight; waiters get its result or error
- Failed fetches are not cached

Called by: connectors/item_store.py (identity lookups)
Depends on: asyncio
"""

import asyncio
import time
from typing import Awaitable, Callable

_MISSING = object()


class SessionCache:
    def __init__(self, ttl_seconds: float = 60, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict = {}
        self._inflight: dict = {}

    def get(self, key, default=None):
        entry = self._entries.get(key)
        if entry is None:
            return default
        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return default
        return value

    def set(self, key, value) -> None:
        self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def invalidate(self, key) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    async def get_or_fetch(self, key, fetch: Callable[[], Awaitable]):
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fill(key, fetch))
            self._inflight[key] = task
            task.add_done_callback(lambda t: self._forget(key, t))
        return await asyncio.shield(task)

    async def _fill(self, key, fetch):
        value = await fetch()
        self.set(key, value)
        return value

    def _forget(self, key, task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Mark the exception retrieved so an unawaited failure doesn't warn
        if not task.cancelled():
            task.exception()
