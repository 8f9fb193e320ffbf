"""Focus session recording."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from studypace.api.deps import get_core_services, request_id_of
from studypace.api.schemas.common import notices_out
from studypace.api.schemas.focus_sessions import FocusSessionRequest, FocusSessionResponse
from studypace.services.core import CoreServices
from studypace.services.notifications.hooks import dispatch_notices

router = APIRouter(tags=["focus-sessions"])


@router.post("/focus-sessions", response_model=FocusSessionResponse, status_code=status.HTTP_201_CREATED)
def record_session(
    request: Request,
    payload: FocusSessionRequest,
    core: CoreServices = Depends(get_core_services),
) -> FocusSessionResponse:
    request_id = request_id_of(request)
    config = payload.model_dump(include={"duration", "subject_id", "topic_id", "sub_topic_id", "note"})
    result = core.focus.save(payload.user_id, config, payload.duration_seconds, payload.quality)
    notices = result.outcome.notices if result.outcome else []
    dispatch_notices(notices, user_id=payload.user_id, request_id=request_id)
    if result.saved and result.session is not None:
        core.streaks.record_activity(payload.user_id)
    return FocusSessionResponse(
        saved=result.saved,
        session_id=result.session.id if result.session is not None else None,
        task_id=result.task_id,
        queued=bool(result.outcome and result.outcome.was_queued),
        notices=notices_out(notices),
        request_id=request_id,
    )
