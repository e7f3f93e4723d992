"""Inquiry workflow models — Inquiries, Items, Cost Calculations."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import Base


class Inquiry(Base):
    __tablename__ = "inquiries"
    __table_args__ = (
        Index("ix_inquiries_status", "status"),
        Index("ix_inquiries_customer", "customer_id"),
        Index("ix_inquiries_created_at", "created_at"),
    )
    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(String(20), default="DRAFT")  # see constants.INQUIRY_STATUSES
    priority = Column(String(10), default="MEDIUM")  # LOW | MEDIUM | HIGH | URGENT
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    deadline = Column(DateTime)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    customer = relationship("Customer", back_populates="inquiries")
    created_by = relationship("User", back_populates="created_inquiries", foreign_keys=[created_by_id])
    items = relationship(
        "InquiryItem",
        back_populates="inquiry",
        cascade="all, delete-orphan",
        order_by="InquiryItem.id",
    )


class InquiryItem(Base):
    __tablename__ = "inquiry_items"
    __table_args__ = (
        Index("ix_items_inquiry", "inquiry_id"),
        Index("ix_items_assigned_status", "assigned_to_id", "status"),
    )
    id = Column(Integer, primary_key=True)
    inquiry_id = Column(Integer, ForeignKey("inquiries.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    quantity = Column(Integer, default=1)
    unit = Column(String(20), default="pcs")
    notes = Column(Text)
    status = Column(String(20), default="PENDING")  # see constants.ITEM_STATUSES
    assigned_to_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    requested_delivery = Column(DateTime)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    inquiry = relationship("Inquiry", back_populates="items")
    assigned_to = relationship("User", back_populates="assigned_items", foreign_keys=[assigned_to_id])
    cost_calculation = relationship(
        "CostCalculation", back_populates="item", uselist=False, cascade="all, delete-orphan"
    )


class CostCalculation(Base):
    __tablename__ = "cost_calculations"
    id = Column(Integer, primary_key=True)
    item_id = Column(
        Integer, ForeignKey("inquiry_items.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    material_cost = Column(Numeric(12, 2), default=0)
    labor_cost = Column(Numeric(12, 2), default=0)
    overhead_cost = Column(Numeric(12, 2), default=0)
    total_cost = Column(Numeric(12, 2), default=0)
    notes = Column(Text)
    calculated_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    item = relationship("InquiryItem", back_populates="cost_calculation")
    calculated_by = relationship("User", foreign_keys=[calculated_by_id])
