"""
schemas/responses.py — Shared response models for OpenAPI documentation

Called by: routers/*.py, main.py
Depends on: pydantic
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = ""


# ── Analytics ───────────────────────────────────────────────────────────


class VpWorkloadItem(BaseModel, extra="allow"):
    id: int
    name: str | None = None
    email: str | None = None
    role: str = ""
    active_items: int = 0


class StatusCount(BaseModel):
    status: str
    count: int = 0


class WorkloadAnalyticsResponse(BaseModel):
    vp_workload: list[VpWorkloadItem] = Field(default_factory=list)
    items_by_status: list[StatusCount] = Field(default_factory=list)
    total_items: int = 0
    time_range: int = 30
    created_in_range: int = 0


# ── Assignment board ────────────────────────────────────────────────────


class NoticeOut(BaseModel):
    level: str
    message: str


class BoardAssignResponse(BaseModel):
    ok: bool
    notices: list[NoticeOut] = Field(default_factory=list)
