"""Smart Today and missed task recovery routes."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from studypace.api.deps import get_core_services, request_id_of
from studypace.api.schemas.common import TaskSummary, notices_out
from studypace.api.schemas.smart_today import (
    MissedTaskActionResponse,
    MissedTaskOut,
    MissedTasksResponse,
    RescheduleRequest,
    SkipRequest,
    SmartTodayResponse,
    SuggestionOut,
)
from studypace.core.config import settings
from studypace.services.core import CoreServices
from studypace.services.missed_tasks import MissedTaskActionResult, SkipReason, skip_reason_label
from studypace.services.notifications.hooks import dispatch_notices

router = APIRouter()


@router.get("/smart-today", response_model=SmartTodayResponse, tags=["smart-today"])
def smart_today(
    request: Request,
    user_id: UUID = Query(...),
    max_suggestions: Optional[int] = Query(default=None, ge=1, le=50),
    core: CoreServices = Depends(get_core_services),
) -> SmartTodayResponse:
    result = core.ranker.rank(user_id, max_suggestions or settings.smart_today_max_suggestions)
    return SmartTodayResponse(
        suggestions=[SuggestionOut.model_validate(s) for s in result.suggestions],
        total_pending=result.total_pending,
        exam_days_away=result.exam_days_away,
        request_id=request_id_of(request),
    )


@router.get("/missed-tasks", response_model=MissedTasksResponse, tags=["missed-tasks"])
def list_missed(
    request: Request,
    user_id: UUID = Query(...),
    core: CoreServices = Depends(get_core_services),
) -> MissedTasksResponse:
    missed = core.missed.list(user_id)
    return MissedTasksResponse(
        missed=[MissedTaskOut.model_validate(item) for item in missed],
        request_id=request_id_of(request),
    )


def _action_response(
    request: Request,
    user_id: UUID,
    task_id: UUID,
    result: MissedTaskActionResult,
    label: str,
) -> MissedTaskActionResponse:
    request_id = request_id_of(request)
    notices = result.outcome.notices if result.outcome else []
    dispatch_notices(notices, user_id=user_id, request_id=request_id)
    return MissedTaskActionResponse(
        task_id=task_id,
        task=TaskSummary.model_validate(result.task) if result.task is not None else None,
        label=label,
        queued=bool(result.outcome and result.outcome.was_queued),
        notices=notices_out(notices),
        request_id=request_id,
    )


@router.post("/missed-tasks/{task_id}/reschedule", response_model=MissedTaskActionResponse, tags=["missed-tasks"])
def reschedule(
    request: Request,
    task_id: UUID,
    payload: RescheduleRequest,
    core: CoreServices = Depends(get_core_services),
) -> MissedTaskActionResponse:
    result = core.missed.reschedule(payload.user_id, task_id)
    return _action_response(request, payload.user_id, task_id, result, skip_reason_label(SkipReason.RESCHEDULED))


@router.post("/missed-tasks/{task_id}/skip", response_model=MissedTaskActionResponse, tags=["missed-tasks"])
def skip(
    request: Request,
    task_id: UUID,
    payload: SkipRequest,
    core: CoreServices = Depends(get_core_services),
) -> MissedTaskActionResponse:
    result = core.missed.skip(payload.user_id, task_id, payload.reason)
    return _action_response(request, payload.user_id, task_id, result, skip_reason_label(payload.reason))
