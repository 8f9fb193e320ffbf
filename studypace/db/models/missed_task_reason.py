"""Audit rows for rescheduled or skipped overdue tasks."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, Index, String, func
from sqlalchemy.dialects.postgresql import UUID

from studypace.db.base import Base


class MissedTaskReason(Base):
    __tablename__ = "missed_task_reasons"
    __table_args__ = (Index("ix_missed_task_reasons_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    task_id = Column(UUID(as_uuid=True), nullable=False)
    user_id = Column(UUID(as_uuid=True), nullable=False)
    reason = Column(String(length=20), nullable=False)
    original_due_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
