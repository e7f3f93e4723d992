"""
filters.py — Item filter predicate for the assignment board

Business Rules:
- Every filter dimension is optional; "" and None both mean "no constraint"
- Dimensions combine with AND
- search: trimmed, case-insensitive substring of item name, item description,
  inquiry title or customer name (any one is enough)
- customer_id / priority come from the parent inquiry; inquiry_id / status /
  assigned_to_id from the item itself
- assigned_to_id == "unassigned" matches items with no assignee
- Missing fields on an item never raise; they just fail the dimension

Called by: assignments/orchestrator.py, routers/assignments.py
Depends on: constants, schemas/items
"""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel

from ..constants import UNASSIGNED
from ..schemas.items import ItemOut


class AssignmentFilters(BaseModel):
    search: str | None = ""
    customer_id: str | int | None = ""
    inquiry_id: str | int | None = ""
    priority: str | None = ""
    status: str | None = ""
    assigned_to_id: str | int | None = ""

    def merged(self, **partial) -> "AssignmentFilters":
        """Return a copy with the given fields replaced."""
        unknown = set(partial) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown filter fields: {', '.join(sorted(unknown))}")
        return self.model_copy(update=partial)


def _is_set(value) -> bool:
    return value is not None and value != ""


def _same_id(a, b) -> bool:
    # Query strings carry ids as text; the store may return integers
    if a is None or b is None:
        return False
    return str(a) == str(b)


def _contains(haystack, needle: str) -> bool:
    return isinstance(haystack, str) and needle in haystack.lower()


def _matches_search(item: ItemOut, needle: str) -> bool:
    inquiry = item.inquiry
    customer = inquiry.customer if inquiry else None
    return (
        _contains(item.name, needle)
        or _contains(item.description, needle)
        or _contains(inquiry.title if inquiry else None, needle)
        or _contains(customer.name if customer else None, needle)
    )


def matches(item: ItemOut, filters: AssignmentFilters) -> bool:
    """True when the item satisfies every active filter dimension."""
    inquiry = item.inquiry

    if _is_set(filters.search):
        needle = str(filters.search).strip().lower()
        if needle and not _matches_search(item, needle):
            return False

    if _is_set(filters.customer_id):
        if not _same_id(inquiry.customer_id if inquiry else None, filters.customer_id):
            return False

    if _is_set(filters.inquiry_id) and not _same_id(item.inquiry_id, filters.inquiry_id):
        return False

    if _is_set(filters.priority):
        if (inquiry.priority if inquiry else None) != filters.priority:
            return False

    if _is_set(filters.status) and item.status != filters.status:
        return False

    if _is_set(filters.assigned_to_id):
        if filters.assigned_to_id == UNASSIGNED:
            if item.assigned_to_id is not None:
                return False
        elif not _same_id(item.assigned_to_id, filters.assigned_to_id):
            return False

    return True


def filter_items(items: Iterable[ItemOut], filters: AssignmentFilters) -> list[ItemOut]:
    """Apply matches() to a sequence, keeping input order."""
    return [item for item in items if matches(item, filters)]
