"""Error classification and recovery policy.

``ErrorHandler.handle`` decides what happens after a failed operation: queue
the write for later, tell the user something, or only log. Nothing is sent to
the user from here; notices come back in ``ErrorOutcome.notices`` and are
delivered by ``studypace.services.notifications.hooks.dispatch_notices``.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import ValidationError

from studypace.core.errors import ErrorCategory, ErrorSeverity, StudyPaceError, ValidationFailure
from studypace.db.store import WriteIntent
from studypace.observability.metrics import log_metric
from studypace.services.notifications.base import Notice
from studypace.services.sync_queue import QueueItem, SyncQueue

logger = logging.getLogger(__name__)

T = TypeVar("T")
QueuePayload = Union[WriteIntent, Dict[str, Any]]

SAVED_LOCALLY = "Saved locally. Will sync when online."
NETWORK_WARNING = "Network error. Please check your connection."
INVALID_INPUT = "Invalid input. Please check your data."
SESSION_EXPIRED = "Session expired. Please log in again."

DEFAULT_MESSAGES = {
    ErrorSeverity.CRITICAL: "Something went wrong. Please restart the app.",
    ErrorSeverity.ERROR: "An error occurred. Please try again.",
    ErrorSeverity.WARNING: "Something unexpected happened.",
    ErrorSeverity.INFO: "Action could not be completed.",
}

# Checked in order; first token found in the lowercased message decides.
_MESSAGE_PATTERNS: Tuple[Tuple[ErrorCategory, Tuple[str, ...]], ...] = (
    (ErrorCategory.NETWORK, ("network", "fetch", "connection", "timeout")),
    (ErrorCategory.VALIDATION, ("validation", "invalid")),
    (ErrorCategory.AUTHENTICATION, ("auth", "unauthorized")),
)


def classify_error(error: BaseException, hint: Optional[ErrorCategory] = None) -> ErrorCategory:
    """Resolve the category of ``error``.

    An explicit hint wins, then the category carried by a tagged error type.
    Matching on the message text is a best-effort fallback for foreign
    exceptions.
    """
    if hint is not None:
        return hint
    if isinstance(error, StudyPaceError) and error.category != ErrorCategory.UNKNOWN:
        return error.category
    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorCategory.NETWORK
    if isinstance(error, ValidationError):
        return ErrorCategory.VALIDATION

    message = str(error).lower()
    for category, tokens in _MESSAGE_PATTERNS:
        if any(token in message for token in tokens):
            return category
    return ErrorCategory.UNKNOWN


@dataclass
class ErrorContext:
    action: str = ""
    category: Optional[ErrorCategory] = None
    severity: ErrorSeverity = ErrorSeverity.ERROR
    user_message: Optional[str] = None
    notify: bool = False
    queue_payload: Optional[Union[QueuePayload, Sequence[QueuePayload]]] = None
    technical: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ErrorOutcome:
    category: ErrorCategory
    notices: List[Notice] = field(default_factory=list)
    queued: List[QueueItem] = field(default_factory=list)

    @property
    def was_queued(self) -> bool:
        return bool(self.queued)


class ErrorHandler:
    def __init__(self, queue: Optional[SyncQueue] = None):
        self.queue = queue

    def handle(self, error: BaseException, context: Optional[ErrorContext] = None) -> ErrorOutcome:
        context = context or ErrorContext()
        category = classify_error(error, context.category)
        logger.log(
            logging.CRITICAL if context.severity == ErrorSeverity.CRITICAL else logging.WARNING,
            "[%s:%s] %s failed: %s context=%s",
            category.value.upper(),
            context.severity.value.upper(),
            context.action or "operation",
            error,
            context.technical,
            exc_info=error if category in (ErrorCategory.DATABASE, ErrorCategory.UNKNOWN) else None,
        )
        log_metric("errors.handled", 1, metadata={"category": category.value, "action": context.action})

        if category == ErrorCategory.NETWORK:
            return self._network(context)
        if category == ErrorCategory.VALIDATION:
            message = context.user_message or _first_issue(error) or INVALID_INPUT
            return ErrorOutcome(category, [Notice("error", message, 4000)])
        if category == ErrorCategory.AUTHENTICATION:
            return ErrorOutcome(category, [Notice("error", context.user_message or SESSION_EXPIRED, 5000)])

        if not context.notify and context.severity != ErrorSeverity.CRITICAL:
            return ErrorOutcome(category)
        message = context.user_message or DEFAULT_MESSAGES[context.severity]
        notice_type = "error" if context.severity == ErrorSeverity.CRITICAL else "warning"
        return ErrorOutcome(category, [Notice(notice_type, message, 4000)])

    def _network(self, context: ErrorContext) -> ErrorOutcome:
        if context.queue_payload is not None and self.queue is not None:
            payloads = context.queue_payload
            if not isinstance(payloads, (list, tuple)):
                payloads = [payloads]
            items = [self.queue.enqueue(payload) for payload in payloads]
            notice = Notice("info", context.user_message or SAVED_LOCALLY, 3000)
            return ErrorOutcome(ErrorCategory.NETWORK, [notice], queued=items)
        notice = Notice("warning", context.user_message or NETWORK_WARNING, 4000)
        return ErrorOutcome(ErrorCategory.NETWORK, [notice])


def _first_issue(error: BaseException) -> Optional[str]:
    if isinstance(error, ValidationFailure):
        return error.issues[0]["msg"] if error.issues else str(error)
    if isinstance(error, ValidationError):
        return ValidationFailure.from_pydantic(error).issues[0]["msg"]
    return None


class RetryExhausted(StudyPaceError):
    """All attempts of ``retry_with_backoff`` failed."""

    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(f"Gave up after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


def retry_with_backoff(
    fn: Callable[[], T],
    *,
    max_attempts: int = 3,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    skip_on: Tuple[Type[BaseException], ...] = (ValidationFailure,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``fn`` until it succeeds, sleeping ``2 ** attempt`` seconds between tries.

    Errors in ``skip_on`` are raised immediately.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return fn()
        except skip_on:
            raise
        except retry_on as exc:
            if attempt == max_attempts:
                logger.error("Retry exhausted after %s attempts: %s", attempt, exc)
                raise RetryExhausted(attempt, exc) from exc
            delay = 2 ** attempt
            logger.warning("Attempt %s/%s failed (%s); retrying in %ss", attempt, max_attempts, exc, delay)
            sleep(delay)
    raise ValueError("max_attempts must be at least 1")
