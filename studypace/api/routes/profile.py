"""Onboarding profile and plan routes."""
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from studypace.api.deps import get_core_services, request_id_of
from studypace.api.schemas.capacity import capacity_out
from studypace.api.schemas.common import notices_out
from studypace.api.schemas.profile import ProfileResponse, ProfileSaveRequest
from studypace.services.capacity import CapacityLimits
from studypace.services.core import CoreServices
from studypace.services.notifications.hooks import dispatch_notices
from studypace.services.persona import ANSWER_FIELDS, Persona, describe_persona, recommended_session_minutes
from studypace.services.plans import ADAPTIVE_PLANS, AdaptivePlan, get_plan, recommend_plans
from studypace.services.profile import ProfileResult, answers_from_row

router = APIRouter(tags=["profile"])


def _response(user_id: UUID, result: ProfileResult, request_id: str) -> ProfileResponse:
    return ProfileResponse(
        user_id=user_id,
        answers=answers_from_row(result.profile),
        study_persona=result.persona.value,
        persona_description=describe_persona(result.persona),
        recommended_session_minutes=recommended_session_minutes(result.persona),
        plan=result.plan,
        alternative_plans=result.plans[1:],
        capacity=capacity_out(result.capacity),
        notices=notices_out(result.outcome.notices if result.outcome else []),
        request_id=request_id,
    )


@router.put("/profile", response_model=ProfileResponse)
def save_profile(
    request: Request,
    payload: ProfileSaveRequest,
    core: CoreServices = Depends(get_core_services),
) -> ProfileResponse:
    """Save onboarding answers and re-derive persona, plan and capacity."""
    request_id = request_id_of(request)
    answers = payload.model_dump(include=set(ANSWER_FIELDS))
    result = core.profiles.save(
        payload.user_id,
        answers,
        biggest_struggle=payload.biggest_struggle,
        personal_notes=payload.personal_notes,
    )
    if result.outcome:
        dispatch_notices(result.outcome.notices, user_id=payload.user_id, request_id=request_id)
    return _response(payload.user_id, result, request_id)


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    request: Request,
    user_id: UUID = Query(...),
    core: CoreServices = Depends(get_core_services),
) -> ProfileResponse:
    profile = core.profiles.get(user_id)
    answers = answers_from_row(profile)
    persona = Persona(profile.study_persona)
    plans = recommend_plans(
        persona,
        focus_difficulty=answers.focus_difficulty,
        consistency_span=answers.consistency_span,
        peak_energy_time=answers.peak_energy_time,
    )
    capacity: CapacityLimits | None = core.capacity.get(user_id)
    result = ProfileResult(profile=profile, persona=persona, plans=plans, capacity=capacity)
    return _response(user_id, result, request_id_of(request))


@router.get("/plans", response_model=List[AdaptivePlan], tags=["plans"])
def list_plans() -> List[AdaptivePlan]:
    return list(ADAPTIVE_PLANS)


@router.get("/plans/{plan_id}", response_model=AdaptivePlan, tags=["plans"])
def read_plan(plan_id: str) -> AdaptivePlan:
    return get_plan(plan_id)
