"""Capacity limits and the override audit trail."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from studypace.db.base import Base


class UserCapacity(Base):
    __tablename__ = "capacity"

    user_id = Column(UUID(as_uuid=True), primary_key=True)
    max_tasks_per_day = Column(Integer, nullable=False)
    default_focus_minutes = Column(Integer, nullable=False)
    default_break_minutes = Column(Integer, nullable=False)
    max_daily_focus_minutes = Column(Integer, nullable=False)
    recommended_sessions_per_day = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class CapacityOverride(Base):
    __tablename__ = "capacity_overrides"
    __table_args__ = (Index("ix_capacity_overrides_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False)
    override_type = Column(String(length=20), nullable=False)
    original_limit = Column(Integer, nullable=False)
    override_value = Column(Integer, nullable=False)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
