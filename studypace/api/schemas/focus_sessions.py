"""Schemas for focus session recording."""
from __future__ import annotations

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel

from studypace.api.schemas.common import NoticeOut


class FocusSessionRequest(BaseModel):
    user_id: UUID
    duration: int
    subject_id: UUID
    topic_id: Optional[UUID] = None
    sub_topic_id: Optional[UUID] = None
    note: Optional[str] = None
    duration_seconds: int
    quality: Optional[Literal["focused", "okay", "distracted"]] = None


class FocusSessionResponse(BaseModel):
    saved: bool
    session_id: Optional[UUID]
    task_id: Optional[UUID]
    queued: bool
    notices: List[NoticeOut]
    request_id: str
