"""No-op notification provider (logs only)."""
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from studypace.services.notifications.base import Notice, NotificationResult, NotificationService


logger = logging.getLogger(__name__)


class NoopNotificationService(NotificationService):
    def notify(self, notice: Notice, *, user_id: Optional[UUID] = None, request_id: str | None = None) -> NotificationResult:
        logger.info(
            "Notice (noop) type=%s user=%s duration_ms=%s message=%s",
            notice.type,
            user_id,
            notice.duration_ms,
            notice.message,
        )
        return NotificationResult(status="noop", reason="notification provider is noop")
