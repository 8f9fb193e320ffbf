from __future__ import annotations

from datetime import date, timedelta

from studypace.services.streaks import StreakTracker, glow_intensity, streak_message

TODAY = date(2026, 2, 14)


def test_fetch_creates_empty_streak(store, user_id) -> None:
    streak = StreakTracker(store).fetch(user_id, today=TODAY)

    assert streak.current_streak_days == 0
    assert streak.last_active_date is None


def test_consecutive_days_extend_streak(store, user_id) -> None:
    tracker = StreakTracker(store)
    for offset in range(3):
        tracker.record_activity(user_id, today=TODAY + timedelta(days=offset))
    streak = tracker.record_activity(user_id, today=TODAY + timedelta(days=2))

    assert streak.current_streak_days == 3
    assert streak.longest_streak == 3


def test_gap_restarts_but_keeps_longest(store, user_id) -> None:
    tracker = StreakTracker(store)
    for offset in range(4):
        tracker.record_activity(user_id, today=TODAY + timedelta(days=offset))

    streak = tracker.record_activity(user_id, today=TODAY + timedelta(days=7))

    assert streak.current_streak_days == 1
    assert streak.longest_streak == 4


def test_fetch_resets_broken_streak(store, user_id) -> None:
    tracker = StreakTracker(store)
    tracker.record_activity(user_id, today=TODAY)
    tracker.record_activity(user_id, today=TODAY + timedelta(days=1))

    assert tracker.fetch(user_id, today=TODAY + timedelta(days=2)).current_streak_days == 2
    assert tracker.fetch(user_id, today=TODAY + timedelta(days=3)).current_streak_days == 0


def test_glow_and_messages() -> None:
    assert [glow_intensity(days) for days in (0, 2, 3, 6, 7, 13, 14, 90)] == [0, 0, 0.15, 0.15, 0.2, 0.2, 0.25, 0.25]
    assert streak_message(0) == "Start your streak today!"
    assert streak_message(5) == "A week of consistency is within reach!"
    assert streak_message(30) == "Incredible dedication! You're unstoppable."
