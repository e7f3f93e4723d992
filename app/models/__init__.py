"""Database models — re-exports all models.

Import from here:  from app.models import User, Inquiry, ...
Or from submodules: from app.models.inquiries import InquiryItem
"""

from .base import Base  # noqa: F401

# Auth & Users
from .auth import User  # noqa: F401

# Customers
from .crm import Customer  # noqa: F401

# Core: Inquiries, Items, Cost Calculations
from .inquiries import CostCalculation, Inquiry, InquiryItem  # noqa: F401

# Audit & Notifications
from .activity import AuditLog, Notification  # noqa: F401
