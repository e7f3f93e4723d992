"""Auth & user models."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (Index("ix_users_role_active", "role", "is_active"),)

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255))
    role = Column(String(20), default="SALES")  # see constants.ROLES
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    created_inquiries = relationship(
        "Inquiry", back_populates="created_by", foreign_keys="Inquiry.created_by_id"
    )
    assigned_items = relationship(
        "InquiryItem", back_populates="assigned_to", foreign_keys="InquiryItem.assigned_to_id"
    )
    notifications = relationship("Notification", back_populates="user")
