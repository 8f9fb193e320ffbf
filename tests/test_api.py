from __future__ import annotations

from datetime import date, timedelta

from studypace.db.store import WriteIntent


def _save_profile(client, user_id, **answers):
    response = client.put("/profile", json={"user_id": str(user_id), **answers})
    assert response.status_code == 200, response.text
    return response.json()


def test_profile_round_trip(client, user_id) -> None:
    body = _save_profile(client, user_id, focus_difficulty="very_hard", biggest_struggle="starting")

    assert body["study_persona"] == "low_focus_short_session"
    assert body["plan"]["id"] == "attention_friendly"
    assert body["capacity"]["default_focus_minutes"] == 20
    assert "20-minute focus sessions" in body["capacity"]["explanation"]
    assert body["request_id"]

    fetched = client.get("/profile", params={"user_id": str(user_id)})
    assert fetched.status_code == 200
    assert fetched.json()["answers"]["focus_difficulty"] == "very_hard"
    assert fetched.json()["plan"]["id"] == "attention_friendly"


def test_missing_profile_is_404(client, user_id) -> None:
    response = client.get("/profile", params={"user_id": str(user_id)})

    assert response.status_code == 404
    assert response.json()["category"] == "database"


def test_invalid_answer_is_422(client, user_id) -> None:
    response = client.put("/profile", json={"user_id": str(user_id), "focus_difficulty": "impossible"})

    assert response.status_code == 422


def test_plans(client) -> None:
    assert len(client.get("/plans").json()) == 8
    assert client.get("/plans/night_owl").json()["id"] == "night_owl"
    assert client.get("/plans/unknown").status_code == 422


def test_capacity_endpoints(client, user_id) -> None:
    params = {"user_id": str(user_id)}
    assert client.get("/capacity", params=params).status_code == 404

    _save_profile(client, user_id, focus_difficulty="easy")

    assert client.get("/capacity", params=params).status_code == 200
    updated = client.patch("/capacity", params=params, json={"max_tasks_per_day": 3})
    assert updated.status_code == 200
    assert updated.json()["max_tasks_per_day"] == 3

    rejected = client.patch("/capacity", params=params, json={"max_tasks_per_day": 11})
    assert rejected.status_code == 422
    assert rejected.json()["issues"][0]["loc"] == ["max_tasks_per_day"]

    usage = client.get("/capacity/usage", params=params).json()
    assert usage["today_task_count"] == 0
    assert usage["remaining_tasks"] == 3
    assert usage["can_add_task"] is True

    recalculated = client.post("/capacity/recalculate", params=params)
    assert recalculated.status_code == 200
    assert recalculated.json()["capacity"]["max_tasks_per_day"] != 3


def test_task_limit_and_override(client, user_id) -> None:
    _save_profile(client, user_id, focus_difficulty="very_hard")
    client.patch("/capacity", params={"user_id": str(user_id)}, json={"max_tasks_per_day": 1})
    today = date.today().isoformat()

    first = client.post("/tasks", json={"user_id": str(user_id), "title": "Read", "due_date": today})
    assert first.status_code == 201
    assert first.json()["task"]["title"] == "Read"

    blocked = client.post("/tasks", json={"user_id": str(user_id), "title": "More", "due_date": today})
    assert blocked.json()["limit_reached"] is True
    assert blocked.json()["task"] is None

    forced = client.post(
        "/tasks",
        json={"user_id": str(user_id), "title": "More", "due_date": today, "override": True},
    )
    assert forced.json()["override_recorded"] is True
    assert forced.json()["task"]["title"] == "More"


def test_blank_title_is_422(client, user_id) -> None:
    response = client.post(
        "/tasks", json={"user_id": str(user_id), "title": "  ", "due_date": date.today().isoformat()}
    )

    assert response.status_code == 422
    assert response.json()["issues"][0]["msg"] == "Title is required"


def test_toggle_task(client, user_id, make_task) -> None:
    task = make_task(date.today())

    response = client.post(f"/tasks/{task.id}/toggle", json={"user_id": str(user_id)})

    assert response.status_code == 200
    assert response.json()["is_completed"] is True
    assert client.post(f"/tasks/{user_id}/toggle", json={"user_id": str(user_id)}).status_code == 404


def test_smart_today(client, user_id, make_task) -> None:
    make_task(date.today() - timedelta(days=1), title="Yesterday")
    make_task(date.today() + timedelta(days=5), title="Essay", priority="high")

    body = client.get("/smart-today", params={"user_id": str(user_id)}).json()

    assert [(s["task"]["title"], s["reason"]) for s in body["suggestions"]] == [
        ("Yesterday", "missed_yesterday"),
        ("Essay", "high_priority"),
    ]
    assert body["total_pending"] == 2
    assert body["exam_days_away"] is None


def test_missed_task_recovery(client, user_id, make_task) -> None:
    overdue = make_task(date.today() - timedelta(days=3), title="Lab report")
    other = make_task(date.today() - timedelta(days=1), title="Flashcards")
    params = {"user_id": str(user_id)}

    listed = client.get("/missed-tasks", params=params).json()["missed"]
    assert [item["task"]["title"] for item in listed] == ["Lab report", "Flashcards"]

    bad = client.post(f"/missed-tasks/{overdue.id}/skip", json={"user_id": str(user_id), "reason": "bored"})
    assert bad.status_code == 422

    skipped = client.post(f"/missed-tasks/{overdue.id}/skip", json={"user_id": str(user_id), "reason": "no_time"})
    assert skipped.status_code == 200
    assert skipped.json()["label"] == "No time"
    assert skipped.json()["task"]["is_completed"] is True

    moved = client.post(f"/missed-tasks/{other.id}/reschedule", json={"user_id": str(user_id)})
    assert moved.json()["task"]["due_date"] == date.today().isoformat()
    assert moved.json()["label"] == "Rescheduled"

    assert client.get("/missed-tasks", params=params).json()["missed"] == []


def test_focus_session(client, store, user_id) -> None:
    subject = store.insert("subjects", {"user_id": user_id, "name": "Chemistry", "color": "#2196f3"})
    payload = {"user_id": str(user_id), "duration": 25, "subject_id": str(subject.id)}

    saved = client.post("/focus-sessions", json={**payload, "duration_seconds": 1500, "quality": "okay"})
    assert saved.status_code == 201
    assert saved.json()["saved"] is True
    assert saved.json()["task_id"]
    assert store.first("user_streaks", {"user_id": user_id}).current_streak_days == 1

    short = client.post("/focus-sessions", json={**payload, "duration_seconds": 30})
    assert short.json()["saved"] is False

    invalid = client.post("/focus-sessions", json={**payload, "duration": 181, "duration_seconds": 600})
    assert invalid.status_code == 422


def test_sync_status_and_drain(client, queue, store, user_id) -> None:
    queue.enqueue(
        WriteIntent(
            operation="insert",
            table="tasks",
            values={"user_id": str(user_id), "title": "Queued", "due_date": date.today().isoformat()},
        )
    )

    status = client.get("/sync/status").json()
    assert status["pending"] == 1
    assert status["max_retries"] == 5
    assert status["items"][0]["table"] == "tasks"

    drained = client.post("/sync/drain").json()
    assert drained["processed"] == 1
    assert drained["pending"] == 0
    assert store.first("tasks", {"user_id": user_id}).title == "Queued"


def test_readiness(client) -> None:
    calibrating = client.post("/readiness", json={"metrics": {"sleep_hours": 7, "hrv": 50}})
    assert calibrating.status_code == 200
    body = calibrating.json()
    assert body["is_calibrating"] is True
    assert body["readiness_score"] == 85
    assert body["baseline"]["days_collected"] == 1

    tired = client.post(
        "/readiness",
        json={
            "metrics": {"sleep_hours": 5, "hrv": 30},
            "baseline": {"avg_sleep": 8, "avg_hrv": 60, "days_collected": 5},
        },
    ).json()
    assert tired["readiness_score"] == 65
    assert tired["mental_load"] == "medium"
    assert len(tired["notes"]) == 2
    assert tired["baseline"]["days_collected"] == 6
    assert tired["baseline"]["avg_sleep"] == 7.5
