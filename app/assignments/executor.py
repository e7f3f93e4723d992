"""
executor.py — Assignment Command Executor

Assigns or unassigns a batch of items in one store call, then waits for a
full refetch before reporting success.

Business Rules:
- user_id=None means unassign; anything else assigns to that user
- One store request per call, carrying every id (never one per item)
- Success: success notice, await refresh, return True
- Failure (any exception from the store): error notice, no refresh, no
  local change, return False; nothing is raised to the caller
- Permission failures (FORBIDDEN/UNAUTHORIZED codes) get their own notice
- Several single-item calls are allowed; each is independently all-or-nothing

Called by: assignments/orchestrator.py, routers/assignments.py
Depends on: connectors/item_store.py, assignments/notifier.py
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable

from ..connectors.item_store import ItemStore, ItemStoreError
from .notifier import Notifier

log = logging.getLogger("inquiry.board")

PERMISSION_MESSAGE = "You do not have permission to manage assignments"


class AssignmentExecutor:
    def __init__(
        self,
        store: ItemStore,
        notifier: Notifier,
        refresh: Callable[[], Awaitable[None]],
        user_name: Callable[[object], str | None] = lambda user_id: None,
    ):
        self.store = store
        self.notifier = notifier
        self.refresh = refresh
        self.user_name = user_name

    async def assign(self, item_ids: Iterable, user_id) -> bool:
        ids = list(dict.fromkeys(item_ids))
        if not ids:
            raise ValueError("item_ids must not be empty")

        action = "unassign" if user_id is None else "assign"
        try:
            if user_id is None:
                await self.store.unassign_items(ids)
            else:
                await self.store.assign_items(ids, user_id)
        except Exception as e:
            log.warning("Failed to %s items %s: %s", action, ids, e)
            if isinstance(e, ItemStoreError) and e.is_permission_error:
                self.notifier.error(PERMISSION_MESSAGE)
            else:
                self.notifier.error(f"Failed to {action} items")
            return False

        if user_id is None:
            self.notifier.success(f"Unassigned {len(ids)} item(s)")
        else:
            name = self.user_name(user_id) or str(user_id)
            self.notifier.success(f"Assigned {len(ids)} item(s) to {name}")

        await self.refresh()
        return True
