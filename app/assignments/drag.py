"""
drag.py — Drag-and-drop interaction state for the assignment board

An explicit finite-state value driven by discrete input events. It never
touches board data: a drop only yields a DropCommand, which the caller hands
to the executor.

Phases:
    idle --start(payload)--> dragging --over(target)--> over
    over --over(other)--> over        over --leave()--> dragging
    any --cancel()--> idle            over --drop()--> idle (+ DropCommand)
    dragging --drop()--> idle (no command)

Business Rules:
- A payload is one item or a whole inquiry group (all its item ids)
- A target is a user id, or UNASSIGNED_ZONE (None) for the unassigned column
- Dropping where every dragged item already sits yields no command
- Events that make no sense in the current phase raise ValueError
"""

from __future__ import annotations

from dataclasses import dataclass, field

UNASSIGNED_ZONE = None
# Source of a group whose items sit with different assignees
MIXED = object()

IDLE = "idle"
DRAGGING = "dragging"
OVER = "over"


@dataclass(frozen=True)
class DragPayload:
    item_ids: tuple
    source: object = UNASSIGNED_ZONE  # current assignee (None = unassigned)
    kind: str = "item"  # item | group
    inquiry_id: object = None

    @classmethod
    def for_item(cls, item) -> "DragPayload":
        return cls(item_ids=(item.id,), source=item.assigned_to_id, kind="item", inquiry_id=item.inquiry_id)

    @classmethod
    def for_group(cls, group) -> "DragPayload":
        sources = {item.assigned_to_id for item in group.items}
        source = sources.pop() if len(sources) == 1 else MIXED
        return cls(item_ids=tuple(group.item_ids), source=source, kind="group", inquiry_id=group.inquiry_id)


@dataclass(frozen=True)
class DropCommand:
    item_ids: list
    user_id: object


@dataclass
class DragState:
    phase: str = IDLE
    payload: DragPayload | None = None
    target: object = field(default=UNASSIGNED_ZONE)

    def _require(self, *phases: str) -> None:
        if self.phase not in phases:
            raise ValueError(f"Invalid drag event in phase {self.phase!r}")

    def start(self, payload: DragPayload) -> None:
        self._require(IDLE)
        if not payload.item_ids:
            raise ValueError("Nothing to drag")
        self.phase, self.payload, self.target = DRAGGING, payload, UNASSIGNED_ZONE

    def over(self, target) -> None:
        self._require(DRAGGING, OVER)
        self.phase, self.target = OVER, target

    def leave(self) -> None:
        self._require(OVER)
        self.phase, self.target = DRAGGING, UNASSIGNED_ZONE

    def cancel(self) -> None:
        self.phase, self.payload, self.target = IDLE, None, UNASSIGNED_ZONE

    def drop(self) -> DropCommand | None:
        self._require(DRAGGING, OVER)
        payload, target, was_over = self.payload, self.target, self.phase == OVER
        self.cancel()
        if not was_over:
            return None
        if payload.source is not MIXED and _same(payload.source, target):
            return None
        return DropCommand(item_ids=list(payload.item_ids), user_id=target)


def _same(a, b) -> bool:
    if a is None or b is None:
        return a is b
    return str(a) == str(b)
