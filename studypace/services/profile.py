"""Onboarding profile storage and the persona / plan / capacity pipeline."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import ValidationError

from studypace.core.errors import DatabaseError, EntityNotFound, NetworkError, ValidationFailure
from studypace.db.store import RelationalStore
from studypace.observability.tracing import trace
from studypace.services.capacity import CapacityLimits, CapacityService
from studypace.services.error_handler import ErrorContext, ErrorHandler, ErrorOutcome
from studypace.services.persona import ANSWER_FIELDS, Persona, ProfileAnswers, classify
from studypace.services.plans import AdaptivePlan, recommend_plans

logger = logging.getLogger(__name__)


@dataclass
class ProfileResult:
    profile: Any
    persona: Persona
    plans: List[AdaptivePlan]
    capacity: Optional[CapacityLimits] = None
    outcome: Optional[ErrorOutcome] = None

    @property
    def plan(self) -> AdaptivePlan:
        return self.plans[0]


def answers_from_row(row: Any) -> ProfileAnswers:
    return ProfileAnswers(**{name: getattr(row, name) for name in ANSWER_FIELDS})


class ProfileService:
    def __init__(self, store: RelationalStore, capacity: CapacityService, errors: ErrorHandler):
        self.store = store
        self.capacity = capacity
        self.errors = errors

    def get(self, user_id: UUID) -> Any:
        profile = self.store.first("user_profiles", {"user_id": user_id})
        if profile is None:
            raise EntityNotFound(f"No profile for user {user_id}")
        return profile

    def save(
        self,
        user_id: UUID,
        answers: ProfileAnswers | Dict[str, Any],
        *,
        biggest_struggle: Optional[str] = None,
        personal_notes: Optional[str] = None,
    ) -> ProfileResult:
        """Store answers, then re-derive persona, plan and capacity.

        Answers not given keep their stored value.
        """
        current = self.store.first("user_profiles", {"user_id": user_id})
        merged = answers_from_row(current).model_dump() if current else {}
        if isinstance(answers, ProfileAnswers):
            answers = answers.model_dump(exclude_none=True)
        merged.update({key: value for key, value in answers.items() if value is not None})
        try:
            answers = ProfileAnswers.model_validate(merged)
        except ValidationError as exc:
            raise ValidationFailure.from_pydantic(exc) from exc

        persona = classify(answers)
        plans = recommend_plans(
            persona,
            focus_difficulty=answers.focus_difficulty,
            consistency_span=answers.consistency_span,
            peak_energy_time=answers.peak_energy_time,
        )
        values: Dict[str, Any] = {
            **answers.model_dump(),
            "study_persona": persona.value,
            "selected_plan_id": plans[0].id.value,
        }
        if biggest_struggle is not None:
            values["biggest_struggle"] = biggest_struggle
        if personal_notes is not None:
            values["personal_notes"] = personal_notes

        with trace("profile.save", metadata={"persona": persona.value}, user_id=str(user_id)):
            if current is None:
                profile = self.store.insert("user_profiles", {"user_id": user_id, **values})
            else:
                profile = self.store.update("user_profiles", {"user_id": user_id}, values)[0]
        logger.info("Profile saved for user %s persona=%s plan=%s", user_id, persona.value, plans[0].id.value)

        result = ProfileResult(profile=profile, persona=persona, plans=plans)
        result.capacity, result.outcome = self._recalculate(user_id, answers, persona)
        return result

    def recalculate_capacity(self, user_id: UUID) -> ProfileResult:
        profile = self.get(user_id)
        answers = answers_from_row(profile)
        persona = Persona(profile.study_persona) if profile.study_persona else classify(answers)
        plans = recommend_plans(
            persona,
            focus_difficulty=answers.focus_difficulty,
            consistency_span=answers.consistency_span,
            peak_energy_time=answers.peak_energy_time,
        )
        capacity, outcome = self._recalculate(user_id, answers, persona)
        return ProfileResult(profile=profile, persona=persona, plans=plans, capacity=capacity, outcome=outcome)

    def _recalculate(self, user_id: UUID, answers: ProfileAnswers, persona: Persona):
        try:
            return self.capacity.calculate_and_save(user_id, answers, persona), None
        except (NetworkError, DatabaseError) as exc:
            outcome = self.errors.handle(
                exc,
                ErrorContext(action="recalculate_capacity", notify=True, technical={"user_id": str(user_id)}),
            )
            return self._stored_capacity(user_id), outcome

    def _stored_capacity(self, user_id: UUID) -> Optional[CapacityLimits]:
        try:
            return self.capacity.get(user_id)
        except (NetworkError, DatabaseError) as exc:
            logger.warning("Stored capacity unavailable for %s: %s", user_id, exc)
            return None
