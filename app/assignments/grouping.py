"""
grouping.py — Bucket board items by parent inquiry

Business Rules:
- One group per distinct inquiry_id; every item lands in exactly one group
- Group order and in-group item order follow first appearance in the input
- Empty input gives no groups
- effective_priority is the most severe of the inquiry's own priority and
  each child's inquiry priority (URGENT > HIGH > MEDIUM > LOW); unknown or
  missing values are ignored

Called by: assignments/orchestrator.py
Depends on: constants, schemas/items
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..constants import PRIORITY_ORDER
from ..schemas.items import ItemOut


def _rank(priority) -> int:
    try:
        return PRIORITY_ORDER.index(priority)
    except ValueError:
        return len(PRIORITY_ORDER)


def most_urgent_priority(nominal, items: Iterable[ItemOut]):
    """Most severe priority among `nominal` and the items' inquiry priorities."""
    most_urgent = nominal
    for item in items:
        candidate = item.inquiry.priority if item.inquiry else None
        if candidate is not None and _rank(candidate) < _rank(most_urgent):
            most_urgent = candidate
    return most_urgent


@dataclass
class InquiryGroup:
    inquiry_id: object
    title: str | None = None
    customer_name: str | None = None
    priority: str | None = None
    items: list = field(default_factory=list)

    @property
    def effective_priority(self):
        return most_urgent_priority(self.priority, self.items)

    @property
    def item_ids(self) -> list:
        return [item.id for item in self.items]

    def as_dict(self) -> dict:
        return {
            "inquiry_id": self.inquiry_id,
            "title": self.title,
            "customer_name": self.customer_name,
            "priority": self.priority,
            "effective_priority": self.effective_priority,
            "items": [item.model_dump(mode="json") for item in self.items],
        }


def group_by_inquiry(items: Iterable[ItemOut]) -> list[InquiryGroup]:
    groups: dict = {}
    for item in items:
        key = str(item.inquiry_id)
        group = groups.get(key)
        if group is None:
            inquiry = item.inquiry
            customer = inquiry.customer if inquiry else None
            group = InquiryGroup(
                inquiry_id=item.inquiry_id,
                title=inquiry.title if inquiry else None,
                customer_name=customer.name if customer else None,
                priority=inquiry.priority if inquiry else None,
            )
            groups[key] = group
        group.items.append(item)
    return list(groups.values())
