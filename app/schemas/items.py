"""
schemas/items.py — Wire shapes for users, customers, inquiries and items

These are both the API response models and the records the assignment
board engine works on. Ids are opaque to the engine: the database uses
integers, but nothing outside the routers depends on that.

Called by: routers/*, connectors/item_store.py, assignments/*
Depends on: pydantic
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

Id = int | str


class _Out(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserOut(_Out):
    id: Id
    name: str | None = None
    email: str | None = None
    role: str = ""
    is_active: bool = True


class CustomerOut(_Out):
    id: Id
    name: str
    email: str | None = None
    is_active: bool = True


class InquiryRef(_Out):
    """Inquiry as embedded in an item: enough to filter and group on."""

    id: Id
    title: str | None = None
    priority: str | None = None
    status: str | None = None
    customer_id: Id | None = None
    customer: CustomerOut | None = None


class InquiryOut(InquiryRef):
    description: str | None = None
    deadline: datetime | None = None
    created_at: datetime | None = None
    item_count: int = 0


class CostCalculationOut(_Out):
    material_cost: Decimal | None = None
    labor_cost: Decimal | None = None
    overhead_cost: Decimal | None = None
    total_cost: Decimal | None = None
    calculated_by_id: Id | None = None


class ItemOut(_Out):
    id: Id
    inquiry_id: Id
    name: str | None = None
    description: str | None = None
    quantity: int | None = None
    unit: str | None = None
    status: str = "PENDING"
    assigned_to_id: Id | None = None
    requested_delivery: datetime | None = None
    inquiry: InquiryRef | None = None
    assigned_to: UserOut | None = None
    cost_calculation: CostCalculationOut | None = None


class ItemListResponse(BaseModel):
    total: int = 0
    limit: int = 200
    data: list[ItemOut] = Field(default_factory=list)


class UserListResponse(BaseModel):
    data: list[UserOut] = Field(default_factory=list)


class CustomerListResponse(BaseModel):
    data: list[CustomerOut] = Field(default_factory=list)


class InquiryListResponse(BaseModel):
    data: list[InquiryOut] = Field(default_factory=list)
