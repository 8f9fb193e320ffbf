"""Task creation under capacity limits and completion toggling."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from studypace.core.errors import EntityNotFound, NetworkError, ValidationFailure
from studypace.db.store import RelationalStore, WriteIntent
from studypace.observability.metrics import log_metric
from studypace.observability.tracing import trace
from studypace.services.capacity import CapacityService
from studypace.services.error_handler import ErrorContext, ErrorHandler, ErrorOutcome
from studypace.services.streaks import StreakTracker

logger = logging.getLogger(__name__)

_MARKUP = re.compile(r"[<>]")


class TaskCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=200)
    priority: Literal["low", "medium", "high"] = "medium"
    due_date: date
    topic_id: Optional[UUID] = None
    sub_topic_id: Optional[UUID] = None
    difficulty: Optional[int] = Field(default=None, ge=1, le=5)
    confidence: Optional[int] = Field(default=None, ge=1, le=5)
    description: Optional[str] = Field(default=None, max_length=1000)
    type: Literal["regular", "revision", "exam_prep"] = "regular"

    @field_validator("title", "description")
    @classmethod
    def strip_markup(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is None:
            return value
        value = _MARKUP.sub("", value).strip()
        if info.field_name == "title" and not value:
            raise ValueError("Title is required")
        return value


@dataclass
class TaskCreateResult:
    task: Optional[Any] = None
    limit_reached: bool = False
    override: Optional[Any] = None
    outcome: Optional[ErrorOutcome] = None


@dataclass
class TaskToggleResult:
    task: Optional[Any] = None
    is_completed: Optional[bool] = None
    outcome: Optional[ErrorOutcome] = None


class TaskService:
    def __init__(
        self,
        store: RelationalStore,
        capacity: CapacityService,
        errors: ErrorHandler,
        streaks: Optional[StreakTracker] = None,
    ):
        self.store = store
        self.capacity = capacity
        self.errors = errors
        self.streaks = streaks

    def create_task(
        self,
        user_id: UUID,
        data: TaskCreate | Dict[str, Any],
        *,
        override: bool = False,
        override_reason: Optional[str] = None,
        today: Optional[date] = None,
    ) -> TaskCreateResult:
        """Insert a task unless today's task limit is reached.

        With ``override`` the limit is exceeded, but only after the override
        row has been written. A capacity check that cannot reach the backend
        lets the task through. A network failure during the insert queues the
        write and reports it in ``outcome``.
        """
        today = today or date.today()
        data = _validate(data)
        if data.due_date < today:
            message = "Due date cannot be in the past"
            raise ValidationFailure(message, [{"loc": ("due_date",), "msg": message}])

        result = TaskCreateResult()
        if data.due_date == today and not self._within_limit(user_id, today):
            if not override:
                logger.info("Task limit reached for user %s", user_id)
                log_metric("tasks.limit_reached", 1)
                return TaskCreateResult(limit_reached=True)
            result.override = self.capacity.record_override(user_id, "task_limit", override_reason, today=today)

        values = {"user_id": user_id, **data.model_dump(exclude_none=True)}
        with trace("tasks.create", metadata={"override": override}, user_id=str(user_id)):
            try:
                result.task = self.store.insert("tasks", values)
            except NetworkError as exc:
                result.outcome = self.errors.handle(
                    exc,
                    ErrorContext(
                        action="create_task",
                        queue_payload=WriteIntent(operation="insert", table="tasks", values=values),
                    ),
                )
                return result
        logger.info("Task %s created for user %s", result.task.id, user_id)
        log_metric("tasks.created", 1, metadata={"priority": data.priority})
        return result

    def toggle(
        self,
        user_id: UUID,
        task_id: UUID,
        *,
        completed: Optional[bool] = None,
        now: Optional[datetime] = None,
    ) -> TaskToggleResult:
        """Flip a task's completion, or set it to ``completed`` when given.

        With an explicit target state the update is queued even if the task
        cannot be read first.
        """
        now = now or datetime.now(timezone.utc)
        filters = {"id": task_id, "user_id": user_id}
        try:
            task = self.store.first("tasks", filters)
        except NetworkError as exc:
            if completed is None:
                return TaskToggleResult(outcome=self.errors.handle(exc, ErrorContext(action="toggle_task")))
            logger.warning("Could not read task %s, writing requested state: %s", task_id, exc)
        else:
            if task is None:
                raise EntityNotFound(f"Task {task_id} not found")
            if completed is None:
                completed = not task.is_completed

        values = {"is_completed": completed, "completed_at": now if completed else None}
        try:
            rows = self.store.update("tasks", filters, values)
        except NetworkError as exc:
            intent = WriteIntent(operation="update", table="tasks", values=values, filters=filters)
            outcome = self.errors.handle(exc, ErrorContext(action="toggle_task", queue_payload=intent))
            return TaskToggleResult(is_completed=completed, outcome=outcome)
        if not rows:
            raise EntityNotFound(f"Task {task_id} not found")
        updated = rows[0]

        if completed and self.streaks is not None:
            try:
                self.streaks.record_activity(user_id, today=now.date())
            except NetworkError as exc:
                logger.warning("Streak not updated for user %s: %s", user_id, exc)
        return TaskToggleResult(task=updated, is_completed=completed)

    def _within_limit(self, user_id: UUID, today: date) -> bool:
        # advisory: an unreadable backend never blocks creation
        try:
            return self.capacity.can_add_task(user_id, today=today)
        except NetworkError as exc:
            logger.warning("Capacity check skipped for user %s: %s", user_id, exc)
            return True


def _validate(data: TaskCreate | Dict[str, Any]) -> TaskCreate:
    if isinstance(data, TaskCreate):
        return data
    try:
        return TaskCreate.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc
