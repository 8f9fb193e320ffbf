"""Delivery of notices produced by the core to the notification surface."""
from __future__ import annotations

from time import perf_counter
from typing import Iterable, List, Optional
from uuid import UUID

from studypace.core.config import settings
from studypace.observability.metrics import log_metric
from studypace.observability.tracing import trace
from studypace.services.notifications.base import Notice, NotificationResult
from studypace.services.notifications.factory import get_notification_service


def dispatch_notices(
    notices: Iterable[Notice],
    *,
    user_id: Optional[UUID] = None,
    request_id: str | None = None,
) -> List[NotificationResult]:
    notices = list(notices)
    if not notices:
        return []
    if not settings.notifications_enabled:
        log_metric("notifications.skipped", len(notices))
        return [NotificationResult(status="skipped", reason="notifications disabled") for _ in notices]

    service = get_notification_service()
    results: List[NotificationResult] = []
    start = perf_counter()
    with trace(
        "notifications.dispatch",
        metadata={"count": len(notices), "provider": settings.notifications_provider},
        user_id=str(user_id) if user_id else None,
        request_id=request_id,
    ):
        for notice in notices:
            results.append(service.notify(notice, user_id=user_id, request_id=request_id))
    log_metric("notifications.sent", len(results), metadata={"provider": settings.notifications_provider})
    log_metric("notifications.duration_ms", (perf_counter() - start) * 1000)
    return results
