from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from uuid import uuid4

import pytest

from studypace.core.errors import EntityNotFound, NetworkError, ValidationFailure
from studypace.services.error_handler import ErrorHandler
from studypace.services.local_storage import MemoryLocalStorage
from studypace.services.missed_tasks import MissedTaskService, SkipReason, days_missed, skip_reason_label
from studypace.services.sync_queue import SyncQueue

NOW = datetime(2026, 4, 12, 15, 30, tzinfo=timezone.utc)
TODAY = NOW.date()


def test_fifty_hours_overdue_is_two_days() -> None:
    due = date(2026, 4, 10)
    now = datetime(2026, 4, 12, 2, 0, tzinfo=timezone.utc)

    assert days_missed(due, now) == 2


def test_just_after_midnight_counts_one_day() -> None:
    assert days_missed(date(2026, 4, 11), datetime(2026, 4, 12, 0, 1, tzinfo=timezone.utc)) == 1


def test_list_is_ascending_capped_and_pending_only(store, user_id, make_task) -> None:
    for offset in range(1, 14):
        make_task(TODAY - timedelta(days=offset))
    make_task(TODAY - timedelta(days=20), is_completed=True)
    make_task(TODAY)

    missed = MissedTaskService(store).list(user_id, today=TODAY, now=NOW)

    assert len(missed) == 10
    due_dates = [item.task.due_date for item in missed]
    assert due_dates == sorted(due_dates)
    assert due_dates[0] == TODAY - timedelta(days=13)
    assert missed[0].days_missed == 13
    assert all(not item.task.is_completed for item in missed)


def test_reschedule_moves_to_today_and_audits(store, user_id, make_task) -> None:
    task = make_task(TODAY - timedelta(days=3))

    updated = MissedTaskService(store).reschedule(user_id, task.id, today=TODAY).task

    assert updated.due_date == TODAY
    audit = store.first("missed_task_reasons", {"task_id": task.id})
    assert audit.reason == "rescheduled"
    assert audit.original_due_date == TODAY - timedelta(days=3)


def test_skip_completes_and_audits(store, user_id, make_task) -> None:
    task = make_task(TODAY - timedelta(days=1))

    updated = MissedTaskService(store).skip(user_id, task.id, "no_time", now=NOW).task

    assert updated.is_completed is True
    assert updated.completed_at is not None
    assert store.first("missed_task_reasons", {"task_id": task.id}).reason == "no_time"
    assert MissedTaskService(store).list(user_id, today=TODAY, now=NOW) == []


def test_skip_rejects_unknown_reason(store, user_id, make_task) -> None:
    task = make_task(TODAY - timedelta(days=1))

    with pytest.raises(ValidationFailure):
        MissedTaskService(store).skip(user_id, task.id, "bored", now=NOW)

    assert store.count("missed_task_reasons", {"task_id": task.id}) == 0
    assert store.first("tasks", {"id": task.id}).is_completed is False


def test_actions_on_foreign_task(store, user_id, make_task) -> None:
    task = make_task(TODAY - timedelta(days=1))
    other_user = uuid4()

    with pytest.raises(EntityNotFound):
        MissedTaskService(store).reschedule(other_user, task.id, today=TODAY)


def test_skip_reason_labels() -> None:
    assert [skip_reason_label(reason) for reason in SkipReason] == [
        "Too difficult",
        "No time",
        "Low priority",
        "Rescheduled",
    ]


def test_cutoff_uses_given_day_not_utc_clock(store, user_id, make_task) -> None:
    make_task(TODAY)
    late_evening_utc = datetime(2026, 4, 13, 1, 0, tzinfo=timezone.utc)

    assert MissedTaskService(store).list(user_id, today=TODAY, now=late_evening_utc) == []


def _unreachable(*args, **kwargs):
    raise NetworkError("Backend unreachable")


def test_offline_reschedule_queues_update_and_audit(store, user_id, make_task, monkeypatch) -> None:
    task = make_task(TODAY - timedelta(days=2))
    queue = SyncQueue(MemoryLocalStorage(), lambda payload: None)
    service = MissedTaskService(store, ErrorHandler(queue))
    monkeypatch.setattr(store, "update", _unreachable)
    monkeypatch.setattr(store, "insert", _unreachable)

    result = service.reschedule(user_id, task.id, today=TODAY)

    assert result.task is None
    assert result.outcome.was_queued
    payloads = [item.payload for item in queue.items()]
    assert [(p["operation"], p["table"]) for p in payloads] == [
        ("update", "tasks"),
        ("insert", "missed_task_reasons"),
    ]
    assert payloads[0]["values"] == {"due_date": TODAY.isoformat()}
    assert payloads[1]["values"]["original_due_date"] == (TODAY - timedelta(days=2)).isoformat()


def test_offline_skip_with_backend_fully_down(store, user_id, make_task, monkeypatch) -> None:
    task = make_task(TODAY - timedelta(days=1))
    queue = SyncQueue(MemoryLocalStorage(), lambda payload: None)
    service = MissedTaskService(store, ErrorHandler(queue))
    for method in ("first", "select", "update", "insert"):
        monkeypatch.setattr(store, method, _unreachable)

    result = service.skip(user_id, task.id, "too_difficult", now=NOW)

    assert [n.message for n in result.outcome.notices] == ["Saved locally. Will sync when online."]
    payloads = [item.payload for item in queue.items()]
    assert payloads[0]["values"]["is_completed"] is True
    assert payloads[1]["values"]["reason"] == "too_difficult"
    assert payloads[1]["values"]["original_due_date"] is None


def test_audit_insert_failure_queues_only_the_audit(store, user_id, make_task, monkeypatch) -> None:
    task = make_task(TODAY - timedelta(days=1))
    queue = SyncQueue(MemoryLocalStorage(), lambda payload: None)
    service = MissedTaskService(store, ErrorHandler(queue))
    monkeypatch.setattr(store, "insert", _unreachable)

    result = service.skip(user_id, task.id, "no_time", now=NOW)

    assert result.task.is_completed is True
    assert [item.payload["table"] for item in queue.items()] == ["missed_task_reasons"]
