from __future__ import annotations

from uuid import uuid4

from studypace.core.config import settings
from studypace.services.notifications import hooks
from studypace.services.notifications.base import Notice, NotificationResult


def test_dispatch_delivers_each_notice(monkeypatch) -> None:
    delivered = []

    class RecordingService:
        def notify(self, notice, *, user_id=None, request_id=None):
            delivered.append((notice.message, request_id))
            return NotificationResult(status="sent")

    monkeypatch.setattr(settings, "notifications_enabled", True)
    monkeypatch.setattr(hooks, "get_notification_service", lambda: RecordingService())

    results = hooks.dispatch_notices(
        [Notice("info", "Saved locally. Will sync when online.", 3000), Notice("error", "Title is required")],
        user_id=uuid4(),
        request_id="req-9",
    )

    assert [r.status for r in results] == ["sent", "sent"]
    assert delivered == [
        ("Saved locally. Will sync when online.", "req-9"),
        ("Title is required", "req-9"),
    ]


def test_dispatch_skipped_when_disabled(monkeypatch) -> None:
    called = {"value": False}

    class DummyService:
        def notify(self, notice, **kwargs):  # pragma: no cover - not used
            called["value"] = True
            return NotificationResult(status="noop")

    monkeypatch.setattr(settings, "notifications_enabled", False)
    monkeypatch.setattr(hooks, "get_notification_service", lambda: DummyService())

    results = hooks.dispatch_notices([Notice("warning", "Network error. Please check your connection.")])

    assert [r.status for r in results] == ["skipped"]
    assert called["value"] is False


def test_noop_provider_reports_noop(monkeypatch) -> None:
    monkeypatch.setattr(settings, "notifications_enabled", True)
    monkeypatch.setattr(settings, "notifications_provider", "noop")

    results = hooks.dispatch_notices([Notice("success", "Task completed")])

    assert results[0].status == "noop"


def test_nothing_to_dispatch() -> None:
    assert hooks.dispatch_notices([]) == []
