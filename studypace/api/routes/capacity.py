"""Capacity limits, usage and overrides."""
from __future__ import annotations

from dataclasses import asdict
from typing import Dict
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from studypace.api.deps import get_core_services, request_id_of
from studypace.api.schemas.capacity import (
    CapacityOut,
    CapacityOverrideRequest,
    CapacityOverrideResponse,
    CapacityRecalculateResponse,
    CapacityUsageOut,
    capacity_out,
)
from studypace.api.schemas.common import notices_out
from studypace.core.errors import EntityNotFound
from studypace.services.core import CoreServices
from studypace.services.notifications.hooks import dispatch_notices

router = APIRouter(prefix="/capacity", tags=["capacity"])


@router.get("", response_model=CapacityOut)
def get_capacity(
    user_id: UUID = Query(...),
    core: CoreServices = Depends(get_core_services),
) -> CapacityOut:
    capacity = core.capacity.get(user_id)
    if capacity is None:
        raise EntityNotFound(f"No capacity stored for user {user_id}")
    return capacity_out(capacity)


@router.patch("", response_model=CapacityOut)
def update_capacity(
    changes: Dict[str, int],
    user_id: UUID = Query(...),
    core: CoreServices = Depends(get_core_services),
) -> CapacityOut:
    return capacity_out(core.capacity.update(user_id, changes))


@router.get("/usage", response_model=CapacityUsageOut)
def get_usage(
    user_id: UUID = Query(...),
    core: CoreServices = Depends(get_core_services),
) -> CapacityUsageOut:
    capacity = core.capacity.get(user_id)
    usage = core.capacity.today_usage(user_id, capacity=capacity)
    return CapacityUsageOut(
        **asdict(usage),
        can_add_task=capacity is None or not usage.is_over_task_limit,
    )


@router.post("/overrides", response_model=CapacityOverrideResponse, status_code=status.HTTP_201_CREATED)
def record_override(
    request: Request,
    payload: CapacityOverrideRequest,
    core: CoreServices = Depends(get_core_services),
) -> CapacityOverrideResponse:
    row = core.capacity.record_override(payload.user_id, payload.override_type, payload.reason)
    return CapacityOverrideResponse(
        id=row.id,
        override_type=row.override_type,
        original_limit=row.original_limit,
        override_value=row.override_value,
        reason=row.reason,
        request_id=request_id_of(request),
    )


@router.post("/recalculate", response_model=CapacityRecalculateResponse)
def recalculate(
    request: Request,
    user_id: UUID = Query(...),
    core: CoreServices = Depends(get_core_services),
) -> CapacityRecalculateResponse:
    request_id = request_id_of(request)
    result = core.profiles.recalculate_capacity(user_id)
    notices = result.outcome.notices if result.outcome else []
    dispatch_notices(notices, user_id=user_id, request_id=request_id)
    return CapacityRecalculateResponse(
        capacity=capacity_out(result.capacity),
        notices=notices_out(notices),
        request_id=request_id,
    )
