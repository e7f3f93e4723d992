"""Per-user workload counters for the assignment board.

pending counts PENDING/ASSIGNED/IN_PROGRESS, completed counts
COSTED/APPROVED/QUOTED, total counts every assigned item. COMPLETED (and
any status outside both sets) only shows up in total.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable

from ..constants import COMPLETED_STATUSES, PENDING_STATUSES
from ..schemas.items import ItemOut, UserOut


@dataclass(frozen=True)
class Workload:
    pending: int = 0
    completed: int = 0
    total: int = 0

    def as_dict(self) -> dict:
        return {"pending": self.pending, "completed": self.completed, "total": self.total}


def aggregate(items: Iterable[ItemOut], users: Iterable[UserOut]) -> dict:
    """Map every user id to its Workload, zeroes included.

    Pass the full item snapshot, not a filtered view.
    """
    by_assignee = defaultdict(list)
    for item in items:
        if item.assigned_to_id is not None:
            by_assignee[str(item.assigned_to_id)].append(item.status)

    workloads = {}
    for user in users:
        statuses = by_assignee.get(str(user.id), [])
        workloads[user.id] = Workload(
            pending=sum(1 for s in statuses if s in PENDING_STATUSES),
            completed=sum(1 for s in statuses if s in COMPLETED_STATUSES),
            total=len(statuses),
        )
    return workloads
