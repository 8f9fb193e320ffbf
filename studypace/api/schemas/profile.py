"""Schemas for onboarding profile and plans."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from studypace.api.schemas.capacity import CapacityOut
from studypace.api.schemas.common import NoticeOut
from studypace.services.persona import ProfileAnswers
from studypace.services.plans import AdaptivePlan


class ProfileSaveRequest(ProfileAnswers):
    user_id: UUID
    biggest_struggle: Optional[str] = None
    personal_notes: Optional[str] = None


class ProfileResponse(BaseModel):
    user_id: UUID
    answers: ProfileAnswers
    study_persona: str
    persona_description: str
    recommended_session_minutes: int
    plan: AdaptivePlan
    alternative_plans: List[AdaptivePlan]
    capacity: Optional[CapacityOut]
    notices: List[NoticeOut]
    request_id: str
