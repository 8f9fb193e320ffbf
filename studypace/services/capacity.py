"""Capacity derivation, today's usage snapshot and limit enforcement."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Literal, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from studypace.core.errors import EntityNotFound, ValidationFailure
from studypace.db.store import RelationalStore
from studypace.services.persona import Persona, ProfileAnswers, classify

logger = logging.getLogger(__name__)

OverrideType = Literal["task_limit", "focus_limit"]

CAPACITY_BOUNDS: Dict[str, Tuple[int, int]] = {
    "max_tasks_per_day": (1, 10),
    "default_focus_minutes": (10, 90),
    "default_break_minutes": (5, 20),
    "max_daily_focus_minutes": (60, 480),
    "recommended_sessions_per_day": (1, 8),
}


class CapacityLimits(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    max_tasks_per_day: int
    default_focus_minutes: int
    default_break_minutes: int
    max_daily_focus_minutes: int
    recommended_sessions_per_day: int


class CapacityUpdate(BaseModel):
    """User edit of individual limits; each field must stay inside its clamp range."""

    model_config = ConfigDict(extra="forbid")

    max_tasks_per_day: Optional[int] = Field(default=None, ge=1, le=10)
    default_focus_minutes: Optional[int] = Field(default=None, ge=10, le=90)
    default_break_minutes: Optional[int] = Field(default=None, ge=5, le=20)
    max_daily_focus_minutes: Optional[int] = Field(default=None, ge=60, le=480)
    recommended_sessions_per_day: Optional[int] = Field(default=None, ge=1, le=8)


# (tasks/day, focus minutes, break minutes, max daily focus minutes, sessions/day)
BASE_CAPACITY: Dict[Persona, Tuple[int, int, int, int, int]] = {
    Persona.LOW_FOCUS_SHORT_SESSION: (4, 20, 7, 90, 3),
    Persona.EXAM_DRIVEN_HIGH_PRESSURE: (7, 35, 7, 180, 5),
    Persona.CONSISTENT_OVERLOADED: (4, 25, 7, 120, 4),
    Persona.BURNOUT_RECOVERY: (3, 17, 10, 60, 2),
    Persona.BALANCED_LEARNER: (6, 25, 5, 150, 4),
}

DAILY_FOCUS_BY_ANSWER = {
    "less_1h": 60,
    "1_2h": 120,
    "2_4h": 180,
    "more_4h": 240,
}


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def derive_capacity(answers: ProfileAnswers, persona: Optional[Persona] = None) -> CapacityLimits:
    """Turn a profile into daily limits.

    Persona base values are adjusted by secondary answers in a fixed order
    (attention, stated focus capacity, consistency, overload, exam boost) and
    finally clamped into the global ranges.
    """
    persona = persona or classify(answers)
    tasks, focus, brk, daily, sessions = BASE_CAPACITY[persona]

    if answers.attention_diagnosis == "yes_adhd" or answers.focus_difficulty == "very_hard":
        tasks = max(2, tasks - 2)
        focus = min(20, focus)
        brk = max(7, brk)
        sessions = max(2, sessions - 1)
    elif answers.attention_diagnosis == "suspected" or answers.focus_difficulty == "often":
        tasks = max(3, tasks - 1)
        focus = min(25, focus)

    # A stated capacity replaces the persona's daily focus base outright.
    if answers.daily_focus_capacity in DAILY_FOCUS_BY_ANSWER:
        daily = DAILY_FOCUS_BY_ANSWER[answers.daily_focus_capacity]
        if answers.daily_focus_capacity == "less_1h":
            sessions = min(3, sessions)

    if answers.consistency_span == "1_2_days" or answers.miss_day_response == "abandon":
        tasks = max(2, tasks - 1)
        focus = max(15, focus - 5)

    if answers.main_drain == "too_many_tasks" or answers.overload_response == "avoid":
        tasks = max(3, tasks - 1)

    if answers.exam_proximity == "within_1m":
        # never raises max daily focus minutes
        tasks = min(8, tasks + 2)
        sessions = min(6, sessions + 1)

    values = {
        "max_tasks_per_day": tasks,
        "default_focus_minutes": focus,
        "default_break_minutes": brk,
        "max_daily_focus_minutes": daily,
        "recommended_sessions_per_day": sessions,
    }
    return CapacityLimits(**{name: clamp(value, *CAPACITY_BOUNDS[name]) for name, value in values.items()})


def explain_capacity(capacity: CapacityLimits) -> str:
    hours, minutes = divmod(capacity.max_daily_focus_minutes, 60)
    focus_time = f"{hours}h {minutes}m" if minutes else f"{hours}h"
    return (
        f"Based on your profile, you work best with {capacity.max_tasks_per_day} tasks per day "
        f"using {capacity.default_focus_minutes}-minute focus sessions. We recommend keeping "
        f"total daily focus time under {focus_time} to prevent burnout."
    )


@dataclass
class CapacityUsage:
    today_task_count: int
    today_focus_minutes: int
    remaining_tasks: int
    remaining_focus_minutes: int
    is_over_task_limit: bool
    is_over_focus_limit: bool


def _day_bounds(day: date) -> Tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class CapacityService:
    """Stores per-user limits and answers "may I add another task today?"."""

    def __init__(self, store: RelationalStore):
        self.store = store

    def get(self, user_id: UUID) -> Optional[CapacityLimits]:
        row = self.store.first("capacity", {"user_id": user_id})
        return CapacityLimits.model_validate(row) if row else None

    def calculate_and_save(
        self,
        user_id: UUID,
        answers: ProfileAnswers,
        persona: Optional[Persona] = None,
    ) -> CapacityLimits:
        """Derive limits and upsert them; a backend failure leaves the stored row untouched."""
        derived = derive_capacity(answers, persona)
        values = derived.model_dump()
        if self.store.count("capacity", {"user_id": user_id}):
            self.store.update("capacity", {"user_id": user_id}, values)
        else:
            self.store.insert("capacity", {"user_id": user_id, **values})
        logger.info("Capacity recalculated for user %s: %s", user_id, values)
        return derived

    def update(self, user_id: UUID, changes: Dict[str, int] | CapacityUpdate) -> CapacityLimits:
        if not isinstance(changes, CapacityUpdate):
            try:
                changes = CapacityUpdate.model_validate(changes)
            except ValidationError as exc:
                raise ValidationFailure.from_pydantic(exc) from exc
        values = changes.model_dump(exclude_none=True)
        rows = self.store.update("capacity", {"user_id": user_id}, values) if values else []
        if values and not rows:
            raise EntityNotFound(f"No capacity stored for user {user_id}")
        current = rows[0] if rows else self.store.first("capacity", {"user_id": user_id})
        if current is None:
            raise EntityNotFound(f"No capacity stored for user {user_id}")
        return CapacityLimits.model_validate(current)

    def today_usage(
        self,
        user_id: UUID,
        *,
        today: Optional[date] = None,
        capacity: Optional[CapacityLimits] = None,
    ) -> CapacityUsage:
        today = today or date.today()
        capacity = capacity or self.get(user_id)
        task_count = self.store.count(
            "tasks", {"user_id": user_id, "due_date": today, "is_completed": False}
        )
        start, end = _day_bounds(today)
        sessions = self.store.select(
            "focus_sessions",
            {"user_id": user_id, "started_at__gte": start, "started_at__lt": end},
        )
        focus_minutes = sum(session.duration_seconds or 0 for session in sessions) // 60

        if capacity is None:
            return CapacityUsage(task_count, focus_minutes, 0, 0, False, False)
        return CapacityUsage(
            today_task_count=task_count,
            today_focus_minutes=focus_minutes,
            remaining_tasks=max(0, capacity.max_tasks_per_day - task_count),
            remaining_focus_minutes=max(0, capacity.max_daily_focus_minutes - focus_minutes),
            is_over_task_limit=task_count >= capacity.max_tasks_per_day,
            is_over_focus_limit=focus_minutes >= capacity.max_daily_focus_minutes,
        )

    def can_add_task(self, user_id: UUID, *, today: Optional[date] = None) -> bool:
        """Advisory check; users without stored limits are never blocked."""
        capacity = self.get(user_id)
        if capacity is None:
            return True
        return not self.today_usage(user_id, today=today, capacity=capacity).is_over_task_limit

    def record_override(
        self,
        user_id: UUID,
        override_type: OverrideType,
        reason: Optional[str] = None,
        *,
        today: Optional[date] = None,
    ):
        if override_type not in ("task_limit", "focus_limit"):
            raise ValidationFailure(f"Unknown override type: {override_type}")
        capacity = self.get(user_id)
        if capacity is None:
            raise EntityNotFound(f"No capacity stored for user {user_id}")
        usage = self.today_usage(user_id, today=today, capacity=capacity)
        if override_type == "task_limit":
            original_limit = capacity.max_tasks_per_day
            override_value = usage.today_task_count + 1
        else:
            original_limit = capacity.max_daily_focus_minutes
            override_value = usage.today_focus_minutes
        row = self.store.insert(
            "capacity_overrides",
            {
                "user_id": user_id,
                "override_type": override_type,
                "original_limit": original_limit,
                "override_value": override_value,
                "reason": reason or None,
            },
        )
        logger.info(
            "Capacity override recorded user=%s type=%s limit=%s value=%s",
            user_id,
            override_type,
            original_limit,
            override_value,
        )
        return row
