"""Daily activity streaks."""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Optional
from uuid import UUID

from studypace.db.store import RelationalStore

logger = logging.getLogger(__name__)


class StreakTracker:
    def __init__(self, store: RelationalStore):
        self.store = store

    def fetch(self, user_id: UUID, *, today: Optional[date] = None) -> Any:
        """Return the user's streak, creating it on first use.

        A streak whose last activity is older than yesterday is reset to zero.
        """
        today = today or date.today()
        streak = self.store.first("user_streaks", {"user_id": user_id})
        if streak is None:
            return self.store.insert(
                "user_streaks",
                {"user_id": user_id, "current_streak_days": 0, "longest_streak": 0, "last_active_date": None},
            )
        if streak.last_active_date and streak.last_active_date < today - timedelta(days=1):
            if streak.current_streak_days:
                logger.info("Streak broken for user %s (last active %s)", user_id, streak.last_active_date)
                streak = self.store.update("user_streaks", {"user_id": user_id}, {"current_streak_days": 0})[0]
        return streak

    def record_activity(self, user_id: UUID, *, today: Optional[date] = None) -> Any:
        today = today or date.today()
        streak = self.store.first("user_streaks", {"user_id": user_id})
        if streak is None:
            return self.store.insert(
                "user_streaks",
                {"user_id": user_id, "current_streak_days": 1, "longest_streak": 1, "last_active_date": today},
            )
        if streak.last_active_date == today:
            return streak

        current = 1
        if streak.last_active_date == today - timedelta(days=1):
            current = streak.current_streak_days + 1
        values = {
            "current_streak_days": current,
            "longest_streak": max(streak.longest_streak, current),
            "last_active_date": today,
        }
        return self.store.update("user_streaks", {"user_id": user_id}, values)[0]


def glow_intensity(streak_days: int) -> float:
    if streak_days <= 2:
        return 0.0
    if streak_days <= 6:
        return 0.15
    if streak_days <= 13:
        return 0.2
    return 0.25


def streak_message(streak_days: int) -> str:
    if streak_days == 0:
        return "Start your streak today!"
    if streak_days == 1:
        return "Day 1! You've started something great."
    if streak_days <= 3:
        return "Building momentum! Keep it up."
    if streak_days <= 6:
        return "A week of consistency is within reach!"
    if streak_days <= 13:
        return "Impressive! You're building a habit."
    if streak_days <= 29:
        return "You've been showing up consistently."
    return "Incredible dedication! You're unstoppable."
