"""Persisting finished focus sessions and linking them to today's tasks."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from studypace.core.errors import NetworkError, ValidationFailure
from studypace.db.store import RelationalStore, WriteIntent
from studypace.observability.metrics import log_metric
from studypace.services.error_handler import ErrorContext, ErrorHandler, ErrorOutcome

logger = logging.getLogger(__name__)

MIN_RECORDED_SECONDS = 60
SessionQuality = Literal["focused", "okay", "distracted"]


class SessionConfig(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    duration: int = Field(ge=1, le=180, description="Planned length in minutes")
    subject_id: UUID
    topic_id: Optional[UUID] = None
    sub_topic_id: Optional[UUID] = None
    note: Optional[str] = Field(default=None, max_length=200)

    @field_validator("note")
    @classmethod
    def empty_note_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


@dataclass
class FocusSessionResult:
    saved: bool
    session: Optional[Any] = None
    task_id: Optional[UUID] = None
    outcome: Optional[ErrorOutcome] = None


def validate_session_config(data: SessionConfig | Dict[str, Any]) -> SessionConfig:
    if isinstance(data, SessionConfig):
        return data
    try:
        return SessionConfig.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc) from exc


class FocusSessionRecorder:
    def __init__(self, store: RelationalStore, errors: ErrorHandler):
        self.store = store
        self.errors = errors

    def save(
        self,
        user_id: UUID,
        config: SessionConfig | Dict[str, Any],
        duration_seconds: int,
        quality: Optional[SessionQuality] = None,
        *,
        now: Optional[datetime] = None,
    ) -> FocusSessionResult:
        """Store a finished session.

        Sessions shorter than a minute are discarded. If the backend is
        unreachable the session row is queued for the next drain and the
        result still counts as saved.
        """
        config = validate_session_config(config)
        now = now or datetime.now(timezone.utc)
        if duration_seconds < MIN_RECORDED_SECONDS:
            logger.info("Discarding %ss focus session for user %s", duration_seconds, user_id)
            return FocusSessionResult(saved=False)

        try:
            task_id = self.link_task(user_id, config, today=now.date(), now=now)
        except NetworkError as exc:
            logger.warning("Could not link focus session to a task: %s", exc)
            task_id = None

        values = {
            "user_id": user_id,
            "subject_id": config.subject_id,
            "topic_id": config.topic_id,
            "sub_topic_id": config.sub_topic_id,
            "task_id": task_id,
            "auto_created_task_id": task_id,
            "duration_seconds": duration_seconds,
            "target_duration_seconds": config.duration * 60,
            "session_quality": quality,
            "session_note": config.note,
            "started_at": now - timedelta(seconds=duration_seconds),
            "ended_at": now,
        }
        try:
            session = self.store.insert("focus_sessions", values)
        except NetworkError as exc:
            outcome = self.errors.handle(
                exc,
                ErrorContext(
                    action="save_focus_session",
                    queue_payload=WriteIntent(operation="insert", table="focus_sessions", values=values),
                ),
            )
            return FocusSessionResult(saved=outcome.was_queued, task_id=task_id, outcome=outcome)

        log_metric("focus_sessions.saved", 1, metadata={"minutes": duration_seconds // 60})
        return FocusSessionResult(saved=True, session=session, task_id=task_id)

    def link_task(
        self,
        user_id: UUID,
        config: SessionConfig,
        *,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> UUID:
        """Return a pending task due today for the same topic, or create a completed one."""
        today = today or date.today()
        filters: Dict[str, Any] = {"user_id": user_id, "due_date": today, "is_completed": False}
        if config.sub_topic_id:
            filters["sub_topic_id"] = config.sub_topic_id
        elif config.topic_id:
            filters.update({"topic_id": config.topic_id, "sub_topic_id__isnull": True})
        else:
            filters.update({"topic_id__isnull": True, "sub_topic_id__isnull": True})

        existing = self.store.first("tasks", filters)
        if existing is not None:
            return existing.id

        task = self.store.insert(
            "tasks",
            {
                "user_id": user_id,
                "topic_id": config.topic_id,
                "sub_topic_id": config.sub_topic_id,
                "title": self._task_title(config),
                "priority": "medium",
                "due_date": today,
                "is_completed": True,
                "completed_at": now or datetime.now(timezone.utc),
                "type": "focus_generated",
            },
        )
        logger.info("Auto-created task %s for focus session", task.id)
        return task.id

    def _task_title(self, config: SessionConfig) -> str:
        if config.sub_topic_id:
            sub_topic = self.store.first("sub_topics", {"id": config.sub_topic_id})
            if sub_topic is not None:
                return f"Focus: {sub_topic.name}"
        if config.topic_id:
            topic = self.store.first("topics", {"id": config.topic_id})
            if topic is not None:
                return f"Focus: {topic.name}"
        subject = self.store.first("subjects", {"id": config.subject_id})
        if subject is not None:
            return f"Focus: {subject.name}"
        return f"Focus session - {config.duration} min"
