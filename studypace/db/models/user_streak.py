"""Daily activity streak ORM model."""
from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, Integer, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from studypace.db.base import Base


class UserStreak(Base):
    __tablename__ = "user_streaks"

    user_id = Column(UUID(as_uuid=True), primary_key=True)
    current_streak_days = Column(Integer, nullable=False, server_default=sa_text("0"))
    longest_streak = Column(Integer, nullable=False, server_default=sa_text("0"))
    last_active_date = Column(Date, nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
