"""Workflow vocabularies shared by models, schemas, services and the board engine.

Statuses and roles are stored as plain strings; these tuples fix their
allowed values and, where it matters, their order.
"""

# ── Users ────────────────────────────────────────────────────────────

ROLES = ("SUPERUSER", "ADMIN", "MANAGER", "SALES", "VPP", "VP", "TECH")
ASSIGNABLE_ROLES = ("VP", "VPP")
ASSIGNER_ROLES = ("VPP", "ADMIN", "SUPERUSER")
WORKLOAD_VIEWER_ROLES = ("VPP", "ADMIN", "SUPERUSER")

# ── Inquiries ────────────────────────────────────────────────────────

INQUIRY_STATUSES = (
    "DRAFT",
    "SUBMITTED",
    "ASSIGNED",
    "COSTING",
    "IN_REVIEW",
    "APPROVED",
    "QUOTED",
    "REJECTED",
    "CONVERTED",
)
ASSIGNABLE_INQUIRY_STATUSES = ("SUBMITTED", "ASSIGNED")

# Most severe first
PRIORITY_ORDER = ("URGENT", "HIGH", "MEDIUM", "LOW")

# ── Items ────────────────────────────────────────────────────────────

# Workflow order
ITEM_STATUSES = (
    "PENDING",
    "ASSIGNED",
    "IN_PROGRESS",
    "COSTED",
    "APPROVED",
    "QUOTED",
    "COMPLETED",
)
ASSIGNABLE_ITEM_STATUSES = ("PENDING", "ASSIGNED")
PENDING_STATUSES = frozenset({"PENDING", "ASSIGNED", "IN_PROGRESS"})
COMPLETED_STATUSES = frozenset({"COSTED", "APPROVED", "QUOTED"})

# Filter sentinel: "assigned_to_id is null"
UNASSIGNED = "unassigned"
