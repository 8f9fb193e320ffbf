"""Focus session ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, Index, Integer, String, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from studypace.db.base import Base


class FocusSession(Base):
    __tablename__ = "focus_sessions"
    __table_args__ = (
        Index("ix_focus_sessions_user_id", "user_id"),
        Index("ix_focus_sessions_started_at", "started_at"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False)
    subject_id = Column(UUID(as_uuid=True), nullable=False)
    topic_id = Column(UUID(as_uuid=True), nullable=True)
    sub_topic_id = Column(UUID(as_uuid=True), nullable=True)
    task_id = Column(UUID(as_uuid=True), nullable=True)
    auto_created_task_id = Column(UUID(as_uuid=True), nullable=True)
    duration_seconds = Column(Integer, nullable=False)
    target_duration_seconds = Column(Integer, nullable=True)
    session_quality = Column(String(length=20), nullable=True)
    session_note = Column(Text, nullable=True)
    session_type = Column(String(length=30), nullable=False, server_default=sa_text("'focus'"))
    started_at = Column(DateTime(timezone=True), nullable=False)
    ended_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
