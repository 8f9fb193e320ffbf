"""Schemas for capacity endpoints."""
from __future__ import annotations

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel

from studypace.api.schemas.common import NoticeOut
from studypace.services.capacity import CapacityLimits, explain_capacity


class CapacityOut(CapacityLimits):
    explanation: str


def capacity_out(capacity: Optional[CapacityLimits]) -> Optional[CapacityOut]:
    if capacity is None:
        return None
    return CapacityOut(**capacity.model_dump(), explanation=explain_capacity(capacity))


class CapacityUsageOut(BaseModel):
    today_task_count: int
    today_focus_minutes: int
    remaining_tasks: int
    remaining_focus_minutes: int
    is_over_task_limit: bool
    is_over_focus_limit: bool
    can_add_task: bool


class CapacityOverrideRequest(BaseModel):
    user_id: UUID
    override_type: Literal["task_limit", "focus_limit"]
    reason: Optional[str] = None


class CapacityOverrideResponse(BaseModel):
    id: UUID
    override_type: str
    original_limit: int
    override_value: int
    reason: Optional[str]
    request_id: str


class CapacityRecalculateResponse(BaseModel):
    capacity: Optional[CapacityOut]
    notices: List[NoticeOut]
    request_id: str
