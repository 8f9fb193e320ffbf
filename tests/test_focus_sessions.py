from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from studypace.core.errors import NetworkError, ValidationFailure
from studypace.services.error_handler import ErrorHandler
from studypace.services.focus_sessions import FocusSessionRecorder, validate_session_config
from studypace.services.local_storage import MemoryLocalStorage
from studypace.services.sync_queue import SyncQueue

NOW = datetime(2026, 3, 10, 15, 30, tzinfo=timezone.utc)
TODAY = date(2026, 3, 10)


@pytest.fixture()
def offline_queue() -> SyncQueue:
    return SyncQueue(MemoryLocalStorage(), lambda payload: None)


@pytest.fixture()
def recorder(store, offline_queue) -> FocusSessionRecorder:
    return FocusSessionRecorder(store, ErrorHandler(offline_queue))


@pytest.fixture()
def biology(store, user_id):
    return store.insert("subjects", {"user_id": user_id, "name": "Biology", "color": "#4caf50"})


@pytest.mark.parametrize("minutes", [0, 181])
def test_duration_out_of_range(minutes: int, biology) -> None:
    with pytest.raises(ValidationFailure):
        validate_session_config({"duration": minutes, "subject_id": biology.id})


def test_long_note_rejected(biology) -> None:
    with pytest.raises(ValidationFailure):
        validate_session_config({"duration": 25, "subject_id": biology.id, "note": "x" * 201})


def test_blank_note_becomes_none(biology) -> None:
    config = validate_session_config({"duration": 25, "subject_id": biology.id, "note": "   "})

    assert config.note is None


def test_short_session_is_discarded(recorder, store, user_id, biology) -> None:
    result = recorder.save(user_id, {"duration": 25, "subject_id": biology.id}, duration_seconds=59, now=NOW)

    assert not result.saved
    assert store.count("focus_sessions") == 0
    assert store.count("tasks") == 0


def test_session_creates_completed_focus_task(recorder, store, user_id, biology) -> None:
    result = recorder.save(
        user_id,
        {"duration": 25, "subject_id": biology.id, "note": "cell cycle"},
        duration_seconds=1500,
        quality="focused",
        now=NOW,
    )

    assert result.saved
    task = store.first("tasks", {"id": result.task_id})
    assert task.title == "Focus: Biology"
    assert task.is_completed
    assert task.type == "focus_generated"
    assert task.due_date == TODAY
    assert result.session.task_id == task.id
    assert result.session.duration_seconds == 1500
    assert result.session.target_duration_seconds == 1500
    assert result.session.session_note == "cell cycle"


def test_session_links_pending_topic_task(recorder, store, user_id, biology, make_task) -> None:
    topic = store.insert("topics", {"subject_id": biology.id, "name": "Genetics"})
    pending = make_task(TODAY, topic_id=topic.id)

    result = recorder.save(
        user_id, {"duration": 30, "subject_id": biology.id, "topic_id": topic.id}, duration_seconds=1800, now=NOW
    )

    assert result.task_id == pending.id
    assert store.count("tasks") == 1


def test_topic_title_used_for_generated_task(recorder, store, user_id, biology) -> None:
    topic = store.insert("topics", {"subject_id": biology.id, "name": "Genetics"})

    result = recorder.save(
        user_id, {"duration": 30, "subject_id": biology.id, "topic_id": topic.id}, duration_seconds=600, now=NOW
    )

    assert store.first("tasks", {"id": result.task_id}).title == "Focus: Genetics"


def test_offline_session_is_queued(recorder, store, user_id, biology, offline_queue, monkeypatch) -> None:
    def offline(table, values):
        raise NetworkError("Failed to fetch")

    monkeypatch.setattr(store, "insert", offline)

    result = recorder.save(user_id, {"duration": 25, "subject_id": biology.id}, duration_seconds=900, now=NOW)

    assert result.saved
    assert result.task_id is None
    [item] = offline_queue.items()
    assert item.payload["table"] == "focus_sessions"
    assert item.payload["values"]["duration_seconds"] == 900
    assert result.outcome.notices[0].type == "info"
