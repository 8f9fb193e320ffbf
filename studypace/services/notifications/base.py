"""Notification surface interface."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional
from uuid import UUID

NoticeType = Literal["info", "success", "warning", "error"]


@dataclass(frozen=True)
class Notice:
    """A user-visible toast the presentation layer should render."""

    type: NoticeType
    message: str
    duration_ms: int = 4000


@dataclass
class NotificationResult:
    status: str
    reason: Optional[str] = None


class NotificationService:
    """Base interface for notification providers."""

    def notify(self, notice: Notice, *, user_id: Optional[UUID] = None, request_id: str | None = None) -> NotificationResult:
        raise NotImplementedError
