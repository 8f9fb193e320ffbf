"""Recovery of overdue tasks: list, move to today, or skip with a reason."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from studypace.core.errors import EntityNotFound, NetworkError, ValidationFailure
from studypace.db.store import RelationalStore, WriteIntent
from studypace.observability.metrics import log_metric
from studypace.services.error_handler import ErrorContext, ErrorHandler, ErrorOutcome

logger = logging.getLogger(__name__)

MISSED_TASKS_LIMIT = 10
SECONDS_PER_DAY = 24 * 60 * 60


class SkipReason(str, Enum):
    TOO_DIFFICULT = "too_difficult"
    NO_TIME = "no_time"
    LOW_PRIORITY = "low_priority"
    RESCHEDULED = "rescheduled"


SKIP_REASON_LABELS = {
    SkipReason.TOO_DIFFICULT: "Too difficult",
    SkipReason.NO_TIME: "No time",
    SkipReason.LOW_PRIORITY: "Low priority",
    SkipReason.RESCHEDULED: "Rescheduled",
}


def skip_reason_label(reason: SkipReason | str) -> str:
    return SKIP_REASON_LABELS[_parse_reason(reason)]


@dataclass
class MissedTask:
    task: Any
    days_missed: int
    subject_name: Optional[str] = None
    subject_color: Optional[str] = None


def days_missed(due_date: date, now: datetime) -> int:
    """Whole days elapsed since midnight UTC of ``due_date``."""
    due = datetime.combine(due_date, time.min, tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return int((now - due).total_seconds() // SECONDS_PER_DAY)


@dataclass
class MissedTaskActionResult:
    task: Optional[Any] = None
    outcome: Optional[ErrorOutcome] = None


class MissedTaskService:
    def __init__(
        self,
        store: RelationalStore,
        errors: Optional[ErrorHandler] = None,
        limit: int = MISSED_TASKS_LIMIT,
    ):
        self.store = store
        self.errors = errors or ErrorHandler()
        self.limit = limit

    def list(
        self,
        user_id: UUID,
        *,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> List[MissedTask]:
        """Pending tasks due before today, longest overdue first."""
        today = today or date.today()
        now = now or datetime.now(timezone.utc)
        tasks = self.store.select(
            "tasks",
            {"user_id": user_id, "is_completed": False, "due_date__lt": today},
            order_by=("due_date",),
            limit=self.limit,
        )
        missed = [MissedTask(task, days_missed(task.due_date, now)) for task in tasks]
        self._attach_subjects(missed)
        return missed

    def reschedule(self, user_id: UUID, task_id: UUID, *, today: Optional[date] = None) -> MissedTaskActionResult:
        today = today or date.today()
        original_due_date = self._original_due_date(user_id, task_id)
        result = self._write(
            "reschedule_task",
            [
                _task_update(user_id, task_id, {"due_date": today}),
                _audit(user_id, task_id, SkipReason.RESCHEDULED, original_due_date),
            ],
        )
        logger.info("Task %s rescheduled from %s to %s", task_id, original_due_date, today)
        log_metric("missed_tasks.rescheduled", 1)
        return result

    def skip(
        self,
        user_id: UUID,
        task_id: UUID,
        reason: SkipReason | str,
        *,
        now: Optional[datetime] = None,
    ) -> MissedTaskActionResult:
        reason = _parse_reason(reason)
        now = now or datetime.now(timezone.utc)
        original_due_date = self._original_due_date(user_id, task_id)
        result = self._write(
            "skip_task",
            [
                _task_update(user_id, task_id, {"is_completed": True, "completed_at": now}),
                _audit(user_id, task_id, reason, original_due_date),
            ],
        )
        logger.info("Task %s skipped (%s)", task_id, reason.value)
        log_metric("missed_tasks.skipped", 1, metadata={"reason": reason.value})
        return result

    def _original_due_date(self, user_id: UUID, task_id: UUID) -> Optional[date]:
        """Due date of the task; ``None`` when the backend cannot be read."""
        try:
            task = self.store.first("tasks", {"id": task_id, "user_id": user_id})
        except NetworkError as exc:
            logger.warning("Could not read task %s before writing: %s", task_id, exc)
            return None
        if task is None:
            raise EntityNotFound(f"Task {task_id} not found")
        return task.due_date

    def _write(self, action: str, intents: List[WriteIntent]) -> MissedTaskActionResult:
        """Apply the task update, then the audit insert.

        On a network failure the failed write and every later one are queued.
        """
        result = MissedTaskActionResult()
        for index, intent in enumerate(intents):
            try:
                applied = self.store.apply(intent)
            except NetworkError as exc:
                result.outcome = self.errors.handle(
                    exc,
                    ErrorContext(action=action, queue_payload=intents[index:]),
                )
                return result
            if intent.operation == "update":
                if not applied:
                    raise EntityNotFound(f"Task {intent.filters.get('id')} not found")
                result.task = applied[0]
        return result

    def _attach_subjects(self, missed: List[MissedTask]) -> None:
        topic_ids = {item.task.topic_id for item in missed if item.task.topic_id}
        if not topic_ids:
            return
        topics = {topic.id: topic for topic in self.store.select("topics", {"id__in": topic_ids})}
        subjects = {
            subject.id: subject
            for subject in self.store.select("subjects", {"id__in": {t.subject_id for t in topics.values()}})
        }
        for item in missed:
            topic = topics.get(item.task.topic_id)
            subject = subjects.get(topic.subject_id) if topic else None
            if subject is not None:
                item.subject_name = subject.name
                item.subject_color = subject.color


def _parse_reason(reason: SkipReason | str) -> SkipReason:
    try:
        return SkipReason(reason)
    except ValueError:
        allowed = ", ".join(member.value for member in SkipReason)
        raise ValidationFailure(f"Invalid skip reason '{reason}'. Expected one of: {allowed}") from None


def _task_update(user_id: UUID, task_id: UUID, values: Dict[str, Any]) -> WriteIntent:
    return WriteIntent(operation="update", table="tasks", values=values, filters={"id": task_id, "user_id": user_id})


def _audit(user_id: UUID, task_id: UUID, reason: SkipReason, original_due_date: Optional[date]) -> WriteIntent:
    return WriteIntent(
        operation="insert",
        table="missed_task_reasons",
        values={
            "task_id": task_id,
            "user_id": user_id,
            "reason": reason.value,
            "original_due_date": original_due_date,
        },
    )
