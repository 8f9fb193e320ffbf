"""Task creation and completion routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from studypace.api.deps import get_core_services, request_id_of
from studypace.api.schemas.common import TaskSummary, notices_out
from studypace.api.schemas.task import (
    TaskCreateRequest,
    TaskCreateResponse,
    TaskToggleRequest,
    TaskToggleResponse,
)
from studypace.services.core import CoreServices
from studypace.services.notifications.hooks import dispatch_notices

router = APIRouter()


@router.post("/tasks", response_model=TaskCreateResponse, status_code=status.HTTP_201_CREATED, tags=["tasks"])
def create_task(
    request: Request,
    payload: TaskCreateRequest,
    core: CoreServices = Depends(get_core_services),
) -> TaskCreateResponse:
    """Create a task; returns ``limit_reached`` instead of inserting when today's limit is hit."""
    request_id = request_id_of(request)
    data = payload.model_dump(exclude={"user_id", "override", "override_reason"})
    result = core.tasks.create_task(
        payload.user_id,
        data,
        override=payload.override,
        override_reason=payload.override_reason,
    )
    notices = result.outcome.notices if result.outcome else []
    dispatch_notices(notices, user_id=payload.user_id, request_id=request_id)
    return TaskCreateResponse(
        task=TaskSummary.model_validate(result.task) if result.task else None,
        limit_reached=result.limit_reached,
        override_recorded=result.override is not None,
        queued=bool(result.outcome and result.outcome.was_queued),
        notices=notices_out(notices),
        request_id=request_id,
    )


@router.post("/tasks/{task_id}/toggle", response_model=TaskToggleResponse, tags=["tasks"])
def toggle_task(
    request: Request,
    task_id: UUID,
    payload: TaskToggleRequest,
    core: CoreServices = Depends(get_core_services),
) -> TaskToggleResponse:
    request_id = request_id_of(request)
    result = core.tasks.toggle(payload.user_id, task_id, completed=payload.is_completed)
    notices = result.outcome.notices if result.outcome else []
    dispatch_notices(notices, user_id=payload.user_id, request_id=request_id)
    return TaskToggleResponse(
        id=task_id,
        is_completed=result.is_completed,
        queued=bool(result.outcome and result.outcome.was_queued),
        notices=notices_out(notices),
        request_id=request_id,
    )
