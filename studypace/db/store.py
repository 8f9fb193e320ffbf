"""Table-addressed CRUD facade over a SQLAlchemy session.

Services reach the backend only through ``RelationalStore`` so that every write
can be described as a serializable ``WriteIntent`` and replayed later by the
sync queue. Filters use ``column`` / ``column__op`` keys::

    store.select("tasks", {"user_id": uid, "is_completed": False, "due_date__lt": today},
                 order_by=("due_date",), limit=10)
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, Iterable, Iterator, List, Literal, Mapping, Optional, Sequence
from uuid import UUID

from pydantic import BaseModel, Field
from sqlalchemy import asc, desc, func, select
from sqlalchemy.exc import DBAPIError, DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from studypace.core.errors import DatabaseError, NetworkError, ValidationFailure
from studypace.db.models import (
    CapacityOverride,
    ExamMode,
    ExamTask,
    FocusSession,
    MissedTaskReason,
    SubTopic,
    Subject,
    Task,
    Topic,
    UserCapacity,
    UserProfile,
    UserStreak,
)

logger = logging.getLogger(__name__)

TABLES = {
    model.__tablename__: model
    for model in (
        Task,
        Subject,
        Topic,
        SubTopic,
        UserCapacity,
        CapacityOverride,
        ExamMode,
        ExamTask,
        MissedTaskReason,
        UserStreak,
        FocusSession,
        UserProfile,
    )
}

_OPERATORS = {
    "eq": lambda col, value: col == value,
    "ne": lambda col, value: col != value,
    "lt": lambda col, value: col < value,
    "lte": lambda col, value: col <= value,
    "gt": lambda col, value: col > value,
    "gte": lambda col, value: col >= value,
    "in": lambda col, value: col.in_(list(value)),
    "isnull": lambda col, value: col.is_(None) if value else col.isnot(None),
}


class WriteIntent(BaseModel):
    """A backend write captured as data so it can be persisted and replayed."""

    operation: Literal["insert", "update"]
    table: str
    values: Dict[str, Any] = Field(default_factory=dict)
    filters: Dict[str, Any] = Field(default_factory=dict)


class RelationalStore:
    """Generic select/insert/update/count access keyed by table name."""

    def __init__(self, db: Session):
        self.db = db

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        order_by: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> List[Any]:
        model = _model(table)
        stmt = select(model).where(*_conditions(model, filters))
        for key in order_by:
            column = _column(model, key.lstrip("-"))
            stmt = stmt.order_by(desc(column) if key.startswith("-") else asc(column))
        if limit is not None:
            stmt = stmt.limit(limit)
        with _translate_errors(self.db, f"select {table}"):
            return list(self.db.execute(stmt).scalars().all())

    def first(self, table: str, filters: Optional[Mapping[str, Any]] = None, *, order_by: Sequence[str] = ()) -> Any:
        rows = self.select(table, filters, order_by=order_by, limit=1)
        return rows[0] if rows else None

    def count(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        model = _model(table)
        stmt = select(func.count()).select_from(model).where(*_conditions(model, filters))
        with _translate_errors(self.db, f"count {table}"):
            return int(self.db.execute(stmt).scalar_one())

    def insert(self, table: str, values: Mapping[str, Any]) -> Any:
        model = _model(table)
        row = model(**{key: _coerce(_column(model, key), value) for key, value in values.items()})
        with _translate_errors(self.db, f"insert {table}"):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return row

    def update(self, table: str, filters: Mapping[str, Any], values: Mapping[str, Any]) -> List[Any]:
        if not filters:
            raise ValidationFailure(f"Refusing unfiltered update on {table}")
        model = _model(table)
        with _translate_errors(self.db, f"update {table}"):
            rows = list(self.db.execute(select(model).where(*_conditions(model, filters))).scalars().all())
            for row in rows:
                for key, value in values.items():
                    setattr(row, key, _coerce(_column(model, key), value))
            self.db.commit()
            for row in rows:
                self.db.refresh(row)
        return rows

    def apply(self, intent: WriteIntent) -> Any:
        """Execute a captured write."""
        if intent.operation == "insert":
            return self.insert(intent.table, intent.values)
        return self.update(intent.table, intent.filters, intent.values)


def _model(table: str):
    try:
        return TABLES[table]
    except KeyError:
        raise ValidationFailure(f"Unknown table: {table}") from None


def _column(model, name: str):
    column = model.__table__.columns.get(name)
    if column is None:
        raise ValidationFailure(f"Unknown column {model.__tablename__}.{name}")
    return column


def _conditions(model, filters: Optional[Mapping[str, Any]]) -> Iterable[Any]:
    conditions = []
    for key, value in (filters or {}).items():
        name, _, op = key.partition("__")
        op = op or "eq"
        if op not in _OPERATORS:
            raise ValidationFailure(f"Unsupported filter operator: {op}")
        column = _column(model, name)
        if op == "in":
            value = [_coerce(column, item) for item in value]
        elif op != "isnull":
            value = _coerce(column, value)
        conditions.append(_OPERATORS[op](getattr(model, column.key), value))
    return conditions


def _coerce(column, value: Any) -> Any:
    """Turn JSON-restored strings back into the column's python type."""
    if not isinstance(value, str):
        return value
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    try:
        if python_type is UUID:
            return UUID(value)
        if python_type is datetime:
            return datetime.fromisoformat(value)
        if python_type is date:
            return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationFailure(f"Invalid value for {column.name}: {value!r}") from exc
    return value


@contextmanager
def _translate_errors(db: Session, action: str) -> Iterator[None]:
    """Roll back and re-raise SQLAlchemy failures as tagged core errors."""
    try:
        yield
    except (OperationalError, DisconnectionError) as exc:
        db.rollback()
        logger.warning("Backend unreachable during %s: %s", action, exc)
        raise NetworkError(f"Backend unreachable during {action}") from exc
    except DBAPIError as exc:
        db.rollback()
        if exc.connection_invalidated:
            logger.warning("Connection dropped during %s: %s", action, exc)
            raise NetworkError(f"Connection dropped during {action}") from exc
        logger.error("Backend error during %s: %s", action, exc)
        raise DatabaseError(f"Backend error during {action}") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Backend error during %s: %s", action, exc)
        raise DatabaseError(f"Backend error during {action}") from exc
