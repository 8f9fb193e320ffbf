"""Smart Today: a short, ranked list of tasks to work on today."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Literal, Optional, Set
from uuid import UUID

from studypace.core.errors import StudyPaceError
from studypace.db.store import RelationalStore
from studypace.observability.metrics import log_metric
from studypace.observability.tracing import trace

logger = logging.getLogger(__name__)

SuggestionReason = Literal["exam_soon", "missed_yesterday", "high_priority", "due_soon"]

DEFAULT_MAX_SUGGESTIONS = 8
EXAM_WINDOW_DAYS = 7


@dataclass
class Suggestion:
    task: Any
    reason: SuggestionReason
    reason_text: str
    priority: int
    subject_name: Optional[str] = None
    subject_color: Optional[str] = None


@dataclass
class SmartTodayResult:
    suggestions: List[Suggestion] = field(default_factory=list)
    total_pending: int = 0
    exam_days_away: Optional[int] = None


class SuggestionRanker:
    """Gathers pending tasks from four sources and ranks them.

    Sources run in a fixed order (exam-linked, overdue, high priority, due
    soon). A task already taken by an earlier source is not added again, so
    it keeps the earlier reason and score.
    """

    def __init__(self, store: RelationalStore):
        self.store = store

    def rank(
        self,
        user_id: UUID,
        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
        *,
        today: Optional[date] = None,
    ) -> SmartTodayResult:
        today = today or date.today()
        with trace("smart_today.rank", metadata={"max_suggestions": max_suggestions}, user_id=str(user_id)):
            try:
                result = self._rank(user_id, max_suggestions, today)
            except StudyPaceError as exc:
                logger.error("Smart Today ranking failed for user %s: %s", user_id, exc)
                log_metric("smart_today.failed", 1)
                return SmartTodayResult()
        log_metric("smart_today.suggestions", len(result.suggestions))
        return result

    def _rank(self, user_id: UUID, max_suggestions: int, today: date) -> SmartTodayResult:
        suggestions: List[Suggestion] = []
        seen: Set[UUID] = set()
        pending = {"user_id": user_id, "is_completed": False}

        def take(tasks: Iterable[Any], reason: SuggestionReason, score, text) -> None:
            for task in tasks:
                if task.id in seen:
                    continue
                seen.add(task.id)
                suggestions.append(Suggestion(task, reason, text(task), score(task)))

        exam_days_away: Optional[int] = None
        exam = self.store.first("exam_modes", {"user_id": user_id, "is_active": True}, order_by=("exam_date",))
        if exam is not None:
            exam_days_away = (exam.exam_date - today).days
            if 0 <= exam_days_away <= EXAM_WINDOW_DAYS:
                links = self.store.select("exam_tasks", {"exam_id": exam.id})
                task_ids = [link.task_id for link in links]
                if task_ids:
                    exam_tasks = self.store.select("tasks", {**pending, "id__in": task_ids})
                    take(
                        exam_tasks,
                        "exam_soon",
                        lambda task: 100 - exam_days_away,
                        lambda task: f"Exam in {exam_days_away} days",
                    )

        overdue = self.store.select("tasks", {**pending, "due_date__lt": today}, order_by=("due_date",))
        take(overdue, "missed_yesterday", lambda task: 85, lambda task: "Missed - carry forward")

        high = self.store.select("tasks", {**pending, "priority": "high"}, order_by=("due_date",))
        take(high, "high_priority", lambda task: 80, lambda task: "High priority")

        upcoming = self.store.select("tasks", {**pending, "due_date__gte": today}, order_by=("due_date",))
        take(
            upcoming,
            "due_soon",
            lambda task: 70 - min((task.due_date - today).days, 30),
            _due_text(today),
        )

        # list.sort is stable: equal scores keep source order
        suggestions.sort(key=lambda suggestion: suggestion.priority, reverse=True)
        suggestions = suggestions[:max_suggestions]
        self._attach_subjects(suggestions)

        return SmartTodayResult(
            suggestions=suggestions,
            total_pending=self.store.count("tasks", pending),
            exam_days_away=exam_days_away,
        )

    def _attach_subjects(self, suggestions: List[Suggestion]) -> None:
        topic_ids = {s.task.topic_id for s in suggestions if s.task.topic_id}
        if not topic_ids:
            return
        topics = {topic.id: topic for topic in self.store.select("topics", {"id__in": topic_ids})}
        subject_ids = {topic.subject_id for topic in topics.values()}
        subjects: Dict[UUID, Any] = {
            subject.id: subject for subject in self.store.select("subjects", {"id__in": subject_ids})
        }
        for suggestion in suggestions:
            topic = topics.get(suggestion.task.topic_id)
            subject = subjects.get(topic.subject_id) if topic else None
            if subject is not None:
                suggestion.subject_name = subject.name
                suggestion.subject_color = subject.color


def _due_text(today: date):
    def text(task) -> str:
        days = (task.due_date - today).days
        return "Due today" if days == 0 else f"Due in {days} days"

    return text


def get_smart_today_suggestions(
    store: RelationalStore,
    user_id: UUID,
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    *,
    today: Optional[date] = None,
) -> SmartTodayResult:
    return SuggestionRanker(store).rank(user_id, max_suggestions, today=today)


def remove_suggestion(suggestions: List[Suggestion], task_id: UUID) -> List[Suggestion]:
    return [s for s in suggestions if s.task.id != task_id]


def reorder_suggestions(suggestions: List[Suggestion], from_index: int, to_index: int) -> List[Suggestion]:
    result = list(suggestions)
    result.insert(to_index, result.pop(from_index))
    return result
