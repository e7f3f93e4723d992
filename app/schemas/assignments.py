"""
schemas/assignments.py — Request bodies for assignment endpoints

Business Rules:
- item_ids must be a non-empty list, duplicates collapse (first-seen order)
- assignee_id is required for assign; unassign takes item_ids only
- Board assign takes user_id=None to mean "unassign"

Called by: routers/items.py, routers/assignments.py
Depends on: pydantic
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .items import Id


def _dedupe(ids: list) -> list:
    return list(dict.fromkeys(ids))


class BulkAssignIn(BaseModel):
    item_ids: list[int] = Field(min_length=1)
    assignee_id: int

    @field_validator("item_ids")
    @classmethod
    def unique_ids(cls, v: list[int]) -> list[int]:
        return _dedupe(v)


class UnassignIn(BaseModel):
    item_ids: list[int] = Field(min_length=1)

    @field_validator("item_ids")
    @classmethod
    def unique_ids(cls, v: list[int]) -> list[int]:
        return _dedupe(v)


class AssignOut(BaseModel):
    success: bool = True
    updated_count: int = 0
    message: str = ""
    data: list[dict] = Field(default_factory=list)


class BoardAssignIn(BaseModel):
    item_ids: list[Id] = Field(min_length=1)
    user_id: Id | None = None


class WorkloadOut(BaseModel):
    user_id: Id
    pending_items: int = 0
    completed_items: int = 0
    total_items: int = 0
    workload_percentage: int = 0
