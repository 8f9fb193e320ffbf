"""Tagged exception types raised by the core.

Each error carries the category the retry policy dispatches on, so callers do
not need to inspect messages to decide between queueing, surfacing or logging.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCategory(str, Enum):
    NETWORK = "network"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class StudyPaceError(Exception):
    """Base exception for core failures."""

    category: ErrorCategory = ErrorCategory.UNKNOWN


class NetworkError(StudyPaceError):
    """Backend unreachable or the connection dropped mid-call."""

    category = ErrorCategory.NETWORK


class AuthenticationError(StudyPaceError):
    """Session missing or expired."""

    category = ErrorCategory.AUTHENTICATION


class DatabaseError(StudyPaceError):
    """Backend reported a failure (constraint, operation, ...)."""

    category = ErrorCategory.DATABASE


class EntityNotFound(DatabaseError):
    """Requested row does not exist."""


class ValidationFailure(StudyPaceError):
    """Malformed or out-of-range input.

    ``issues`` holds structured field errors in pydantic's shape
    (``{"loc": (...), "msg": "..."}``); the first one is what users see.
    """

    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, issues: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.issues = issues or [{"loc": (), "msg": message}]

    @classmethod
    def from_pydantic(cls, exc: Any) -> "ValidationFailure":
        issues = [
            {"loc": tuple(err.get("loc", ())), "msg": _strip_prefix(err.get("msg", ""))}
            for err in exc.errors()
        ]
        first = issues[0]["msg"] if issues else "Invalid input"
        return cls(first, issues)


def _strip_prefix(message: str) -> str:
    # pydantic prefixes messages raised from custom validators
    prefix = "Value error, "
    return message[len(prefix):] if message.startswith(prefix) else message
