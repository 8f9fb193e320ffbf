from __future__ import annotations

import pytest

from studypace.core.errors import DatabaseError, EntityNotFound, NetworkError
from studypace.services.capacity import CapacityService
from studypace.services.error_handler import ErrorHandler
from studypace.services.persona import Persona
from studypace.services.plans import PlanId
from studypace.services.profile import ProfileService


@pytest.fixture()
def service(store) -> ProfileService:
    return ProfileService(store, CapacityService(store), ErrorHandler())


def test_save_derives_persona_plan_and_capacity(service, store, user_id) -> None:
    result = service.save(user_id, {"focus_difficulty": "very_hard"}, biggest_struggle="starting")

    assert result.persona == Persona.LOW_FOCUS_SHORT_SESSION
    assert result.plan.id == PlanId.ATTENTION_FRIENDLY
    assert result.profile.study_persona == "low_focus_short_session"
    assert result.profile.selected_plan_id == "attention_friendly"
    assert result.profile.biggest_struggle == "starting"
    assert result.capacity.default_focus_minutes == 20
    assert store.first("capacity", {"user_id": user_id}).max_tasks_per_day == result.capacity.max_tasks_per_day


def test_save_merges_with_stored_answers(service, user_id) -> None:
    service.save(user_id, {"focus_difficulty": "very_hard"})

    result = service.save(user_id, {"exam_proximity": "within_1m"})

    assert result.profile.focus_difficulty == "very_hard"
    assert result.profile.exam_proximity == "within_1m"
    assert result.persona == Persona.LOW_FOCUS_SHORT_SESSION


def test_get_missing_profile(service, user_id) -> None:
    with pytest.raises(EntityNotFound):
        service.get(user_id)


def test_capacity_failure_keeps_profile(service, store, user_id, monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise DatabaseError("capacity table locked")

    monkeypatch.setattr(service.capacity, "calculate_and_save", broken)

    result = service.save(user_id, {"focus_difficulty": "easy"})

    assert result.capacity is None
    assert store.first("user_profiles", {"user_id": user_id}) is not None
    assert [notice.type for notice in result.outcome.notices] == ["warning"]


def test_failed_recalculation_returns_stored_capacity(service, store, user_id, monkeypatch) -> None:
    service.save(user_id, {"focus_difficulty": "easy"})
    stored = store.first("capacity", {"user_id": user_id}).max_tasks_per_day

    def broken(*args, **kwargs):
        raise NetworkError("Backend unreachable during upsert capacity")

    monkeypatch.setattr(service.capacity, "calculate_and_save", broken)

    result = service.save(user_id, {"focus_difficulty": "very_hard"})

    assert result.capacity is not None
    assert result.capacity.max_tasks_per_day == stored
    assert result.outcome is not None


def test_recalculate_uses_stored_profile(service, store, user_id) -> None:
    service.save(user_id, {"main_drain": "too_many_tasks"})
    store.update("capacity", {"user_id": user_id}, {"max_tasks_per_day": 10})

    result = service.recalculate_capacity(user_id)

    assert result.capacity.max_tasks_per_day < 10
    assert store.first("capacity", {"user_id": user_id}).max_tasks_per_day == result.capacity.max_tasks_per_day
