from __future__ import annotations

import pytest

from studypace.services.capacity import BASE_CAPACITY
from studypace.services.persona import Persona, ProfileAnswers, classify, describe_persona, recommended_session_minutes
from studypace.services.plans import PERSONA_PLANS


def test_very_hard_focus_wins_over_every_later_rule() -> None:
    answers = ProfileAnswers(
        focus_difficulty="very_hard",
        exam_proximity="within_1m",
        guidance_level="strong",
        miss_day_response="abandon",
        main_drain="too_many_tasks",
        overload_response="avoid",
    )

    assert classify(answers) == Persona.LOW_FOCUS_SHORT_SESSION


def test_often_plus_suspected_is_low_focus_but_often_alone_is_not() -> None:
    assert classify(ProfileAnswers(focus_difficulty="often", attention_diagnosis="suspected")) == (
        Persona.LOW_FOCUS_SHORT_SESSION
    )
    assert classify(ProfileAnswers(focus_difficulty="often")) == Persona.BALANCED_LEARNER


@pytest.mark.parametrize("guidance", ["strong", "decide_all"])
def test_imminent_exam_with_strong_guidance_beats_burnout(guidance: str) -> None:
    answers = ProfileAnswers(exam_proximity="within_1m", guidance_level=guidance, miss_day_response="abandon")

    assert classify(answers) == Persona.EXAM_DRIVEN_HIGH_PRESSURE


def test_imminent_exam_with_light_guidance_falls_through() -> None:
    answers = ProfileAnswers(exam_proximity="within_1m", guidance_level="minimal")

    assert classify(answers) == Persona.BALANCED_LEARNER


@pytest.mark.parametrize(
    "answers",
    [
        ProfileAnswers(miss_day_response="abandon"),
        ProfileAnswers(consistency_span="1_2_days"),
        ProfileAnswers(overload_response="pause", main_drain="stress"),
    ],
)
def test_burnout_signals(answers: ProfileAnswers) -> None:
    assert classify(answers) == Persona.BURNOUT_RECOVERY


def test_burnout_beats_overload() -> None:
    answers = ProfileAnswers(consistency_span="1_2_days", main_drain="too_many_tasks", overload_response="avoid")

    assert classify(answers) == Persona.BURNOUT_RECOVERY


@pytest.mark.parametrize("response", ["rush_stress", "avoid"])
def test_overloaded(response: str) -> None:
    answers = ProfileAnswers(main_drain="too_many_tasks", overload_response=response)

    assert classify(answers) == Persona.CONSISTENT_OVERLOADED


def test_empty_profile_is_balanced_and_deterministic() -> None:
    results = {classify(ProfileAnswers()) for _ in range(5)}

    assert results == {Persona.BALANCED_LEARNER}


def test_every_persona_has_plan_capacity_and_description() -> None:
    for persona in Persona:
        assert persona in PERSONA_PLANS
        assert persona in BASE_CAPACITY
        assert describe_persona(persona)
        assert recommended_session_minutes(persona) > 0
