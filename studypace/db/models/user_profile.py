"""Onboarding profile ORM model."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from studypace.db.base import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    user_id = Column(UUID(as_uuid=True), primary_key=True)
    age_range = Column(String(length=30), nullable=True)
    role = Column(String(length=30), nullable=True)
    primary_goal = Column(String(length=30), nullable=True)
    focus_difficulty = Column(String(length=30), nullable=True)
    attention_diagnosis = Column(String(length=30), nullable=True)
    peak_energy_time = Column(String(length=30), nullable=True)
    daily_focus_capacity = Column(String(length=30), nullable=True)
    main_drain = Column(String(length=30), nullable=True)
    consistency_span = Column(String(length=30), nullable=True)
    miss_day_response = Column(String(length=30), nullable=True)
    overload_response = Column(String(length=30), nullable=True)
    planning_style = Column(String(length=30), nullable=True)
    guidance_level = Column(String(length=30), nullable=True)
    exam_proximity = Column(String(length=30), nullable=True)
    biggest_struggle = Column(Text, nullable=True)
    personal_notes = Column(Text, nullable=True)
    study_persona = Column(String(length=40), nullable=True)
    selected_plan_id = Column(String(length=40), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
