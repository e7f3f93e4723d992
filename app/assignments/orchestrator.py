"""
orchestrator.py — Assignment board data orchestrator

Owns the working set (items, users, customers, inquiries), the current
filters, and the fetch lifecycle. Everything the board displays is derived
from that state on read.

Business Rules:
- load() fetches all four lists concurrently and applies them only if all
  four succeed; on any failure one error notice is raised and the previous
  data stays as it was
- First load runs under state="loading"; refresh() (and every refresh
  triggered by a mutation) runs under refreshing=True instead
- set_filters() never fetches; derived views recompute from loaded data
- user_workloads always uses the unfiltered item set
- Mutations go through the executor; a successful one awaits refresh()

Lifecycle:
    idle --load()--> loading --settled--> idle
    idle --refresh()/assign--> idle + refreshing --settled--> idle

Called by: routers/assignments.py, scripts/board_cli.py
Depends on: assignments/{filters,grouping,workload,executor,notifier}, connectors/item_store.py
"""

from __future__ import annotations

import asyncio
import logging

from ..config import settings
from ..connectors.item_store import ItemStore, ItemStoreError
from ..constants import ASSIGNABLE_ROLES
from ..schemas.errors import SERVER
from .executor import PERMISSION_MESSAGE, AssignmentExecutor
from .filters import AssignmentFilters, filter_items
from .grouping import group_by_inquiry
from .notifier import Notifier
from .workload import aggregate

log = logging.getLogger("inquiry.board")


async def _fetch_part(label: str, coro):
    """Tag a failed list call with the list it was fetching."""
    try:
        return await coro
    except ItemStoreError as e:
        raise ItemStoreError(e.code, f"Failed to fetch {label}: {e.message}", e.status_code) from e
    except Exception as e:
        raise ItemStoreError(SERVER, f"Failed to fetch {label}: {e}") from e


class AssignmentsData:
    def __init__(
        self,
        store: ItemStore,
        notifier: Notifier | None = None,
        items_limit: int | None = None,
        customers_limit: int | None = None,
        inquiries_limit: int | None = None,
    ):
        self.store = store
        self.notifier = notifier or Notifier()
        self.items_limit = items_limit or settings.items_limit
        self.customers_limit = customers_limit or settings.customers_limit
        self.inquiries_limit = inquiries_limit or settings.inquiries_limit

        self.items: list = []
        self.users: list = []
        self.customers: list = []
        self.inquiries: list = []

        self.state = "idle"
        self.refreshing = False
        self.loaded = False
        self.last_error: ItemStoreError | None = None
        self.filters = AssignmentFilters()

        self.executor = AssignmentExecutor(
            store, self.notifier, refresh=self.refresh, user_name=self._user_name
        )

    # ── Lifecycle ────────────────────────────────────────────────────

    @property
    def loading(self) -> bool:
        return self.state == "loading"

    async def load(self) -> bool:
        return await self._fetch(is_refresh=False)

    async def refresh(self) -> None:
        await self._fetch(is_refresh=True)

    async def _fetch(self, is_refresh: bool) -> bool:
        if is_refresh:
            self.refreshing = True
        else:
            self.state = "loading"
        try:
            # All four settle before anything is applied or reported
            results = await asyncio.gather(
                _fetch_part("items", self.store.list_items(limit=self.items_limit)),
                _fetch_part("users", self.store.list_users(roles=ASSIGNABLE_ROLES, active_only=True)),
                _fetch_part(
                    "customers",
                    self.store.list_customers(active_only=True, limit=self.customers_limit),
                ),
                _fetch_part("inquiries", self.store.list_inquiries(limit=self.inquiries_limit)),
                return_exceptions=True,
            )
            failed = next((r for r in results if isinstance(r, BaseException)), None)
            if failed is not None:
                raise failed
            items, users, customers, inquiries = results
        except ItemStoreError as e:
            log.warning("Failed to load assignments data: %s", e.message)
            self.last_error = e
            self.notifier.error(PERMISSION_MESSAGE if e.is_permission_error else e.message)
            return False
        finally:
            self.state = "idle"
            self.refreshing = False

        self.items, self.users, self.customers, self.inquiries = items, users, customers, inquiries
        self.loaded = True
        self.last_error = None
        log.debug(
            "Board loaded: %d items, %d users, %d customers, %d inquiries",
            len(items), len(users), len(customers), len(inquiries),
        )
        return True

    # ── Filters ──────────────────────────────────────────────────────

    def set_filters(self, **partial) -> AssignmentFilters:
        self.filters = self.filters.merged(**partial)
        return self.filters

    def clear_filters(self) -> None:
        self.filters = AssignmentFilters()

    # ── Commands ─────────────────────────────────────────────────────

    async def assign_items(self, item_ids, user_id) -> bool:
        return await self.executor.assign(item_ids, user_id)

    # ── Derived views ────────────────────────────────────────────────

    @property
    def filtered_items(self) -> list:
        return filter_items(self.items, self.filters)

    @property
    def unassigned_items(self) -> list:
        return [item for item in self.filtered_items if item.assigned_to_id is None]

    @property
    def assigned_items(self) -> list:
        return [item for item in self.filtered_items if item.assigned_to_id is not None]

    @property
    def groups(self) -> list:
        return group_by_inquiry(self.filtered_items)

    @property
    def user_workloads(self) -> dict:
        return aggregate(self.items, self.users)

    def _user_name(self, user_id) -> str | None:
        for user in self.users:
            if str(user.id) == str(user_id):
                return user.name
        return None

    def snapshot(self) -> dict:
        """JSON-ready read model of the board."""
        filtered = self.filtered_items
        unassigned = [i for i in filtered if i.assigned_to_id is None]
        workloads = self.user_workloads
        return {
            "filters": self.filters.model_dump(),
            "loading": self.loading,
            "refreshing": self.refreshing,
            "counts": {
                "items": len(self.items),
                "filtered": len(filtered),
                "unassigned": len(unassigned),
                "assigned": len(filtered) - len(unassigned),
            },
            "unassigned_groups": [g.as_dict() for g in group_by_inquiry(unassigned)],
            "users": [
                {
                    **user.model_dump(mode="json"),
                    "workload": workloads[user.id].as_dict(),
                    "items": [
                        i.model_dump(mode="json")
                        for i in filtered
                        if i.assigned_to_id is not None and str(i.assigned_to_id) == str(user.id)
                    ],
                }
                for user in self.users
            ],
            "customers": [c.model_dump(mode="json") for c in self.customers],
            "inquiries": [q.model_dump(mode="json") for q in self.inquiries],
            "notices": [{"level": n.level, "message": n.message} for n in self.notifier.notices],
        }
