"""Shared response pieces."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from studypace.services.notifications.base import Notice


class NoticeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: Literal["info", "success", "warning", "error"]
    message: str
    duration_ms: int


class TaskSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    priority: str
    due_date: date
    is_completed: bool
    completed_at: Optional[datetime]
    topic_id: Optional[UUID]
    sub_topic_id: Optional[UUID]
    type: Optional[str]


def notices_out(notices: Optional[List[Notice]]) -> List[NoticeOut]:
    return [NoticeOut.model_validate(notice) for notice in notices or []]
