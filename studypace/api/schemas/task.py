"""Schemas for task endpoints."""
from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel

from studypace.api.schemas.common import NoticeOut, TaskSummary


class TaskCreateRequest(BaseModel):
    user_id: UUID
    title: str
    due_date: date
    priority: Literal["low", "medium", "high"] = "medium"
    topic_id: Optional[UUID] = None
    sub_topic_id: Optional[UUID] = None
    difficulty: Optional[int] = None
    confidence: Optional[int] = None
    description: Optional[str] = None
    type: Literal["regular", "revision", "exam_prep"] = "regular"
    override: bool = False
    override_reason: Optional[str] = None


class TaskCreateResponse(BaseModel):
    task: Optional[TaskSummary]
    limit_reached: bool
    override_recorded: bool
    queued: bool
    notices: List[NoticeOut]
    request_id: str


class TaskToggleRequest(BaseModel):
    user_id: UUID
    is_completed: Optional[bool] = None


class TaskToggleResponse(BaseModel):
    id: UUID
    is_completed: Optional[bool]
    queued: bool
    notices: List[NoticeOut]
    request_id: str
