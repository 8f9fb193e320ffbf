"""Schemas for Smart Today suggestions."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from studypace.api.schemas.common import NoticeOut, TaskSummary


class SuggestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    task: TaskSummary
    reason: str
    reason_text: str
    priority: int
    subject_name: Optional[str]
    subject_color: Optional[str]


class SmartTodayResponse(BaseModel):
    suggestions: List[SuggestionOut]
    total_pending: int
    exam_days_away: Optional[int]
    request_id: str


class MissedTaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    task: TaskSummary
    days_missed: int
    subject_name: Optional[str]
    subject_color: Optional[str]


class MissedTasksResponse(BaseModel):
    missed: List[MissedTaskOut]
    request_id: str


class RescheduleRequest(BaseModel):
    user_id: UUID


class SkipRequest(BaseModel):
    user_id: UUID
    reason: str


class MissedTaskActionResponse(BaseModel):
    task_id: UUID
    task: Optional[TaskSummary]
    label: str
    queued: bool
    notices: List[NoticeOut]
    request_id: str
