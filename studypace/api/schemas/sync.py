"""Schemas for the offline sync queue."""
from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel


class QueueItemOut(BaseModel):
    id: str
    table: str
    operation: str
    enqueued_at: datetime
    retry_count: int


class SyncStatusResponse(BaseModel):
    pending: int
    max_retries: int
    items: List[QueueItemOut]
    request_id: str


class SyncDrainResponse(BaseModel):
    processed: int
    failed: int
    dropped: int
    skipped: bool
    pending: int
    request_id: str
