"""Rule-based study persona classification from onboarding answers."""
from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class Persona(str, Enum):
    LOW_FOCUS_SHORT_SESSION = "low_focus_short_session"
    EXAM_DRIVEN_HIGH_PRESSURE = "exam_driven_high_pressure"
    BURNOUT_RECOVERY = "burnout_recovery"
    CONSISTENT_OVERLOADED = "consistent_overloaded"
    BALANCED_LEARNER = "balanced_learner"


AgeRange = Literal["under_16", "16_18", "19_25", "26_plus"]
Role = Literal["school", "college", "professional", "exam_prep"]
PrimaryGoal = Literal["consistency", "exams", "overload", "habits"]
FocusDifficulty = Literal["easy", "sometimes", "often", "very_hard"]
AttentionDiagnosis = Literal["no", "yes_adhd", "suspected", "no_say"]
PeakEnergyTime = Literal["early_morning", "late_morning", "afternoon", "night"]
DailyFocusCapacity = Literal["less_1h", "1_2h", "2_4h", "more_4h"]
MainDrain = Literal["mental", "phone", "stress", "too_many_tasks"]
ConsistencySpan = Literal["1_2_days", "3_5_days", "1_2_weeks", "more_2_weeks"]
MissDayResponse = Literal["resume", "guilty_delay", "abandon", "depends_mood"]
OverloadResponse = Literal["reschedule", "rush_stress", "avoid", "pause"]
PlanningStyle = Literal["daily", "weekly", "advance", "guide_me"]
GuidanceLevel = Literal["minimal", "balanced", "strong", "decide_all"]
ExamProximity = Literal["within_1m", "within_3_6m", "later", "no"]


class ProfileAnswers(BaseModel):
    """Onboarding answers; every field is optional until the user answers it."""

    model_config = ConfigDict(frozen=True)

    age_range: Optional[AgeRange] = None
    role: Optional[Role] = None
    primary_goal: Optional[PrimaryGoal] = None
    focus_difficulty: Optional[FocusDifficulty] = None
    attention_diagnosis: Optional[AttentionDiagnosis] = None
    peak_energy_time: Optional[PeakEnergyTime] = None
    daily_focus_capacity: Optional[DailyFocusCapacity] = None
    main_drain: Optional[MainDrain] = None
    consistency_span: Optional[ConsistencySpan] = None
    miss_day_response: Optional[MissDayResponse] = None
    overload_response: Optional[OverloadResponse] = None
    planning_style: Optional[PlanningStyle] = None
    guidance_level: Optional[GuidanceLevel] = None
    exam_proximity: Optional[ExamProximity] = None


ANSWER_FIELDS = tuple(ProfileAnswers.model_fields)


def classify(answers: ProfileAnswers) -> Persona:
    """Return the persona for a set of answers.

    Rules are evaluated top to bottom and the first match wins, so a profile
    that matches several rules always lands on the highest-priority persona.
    """
    # 1. attention and focus challenges
    if (
        answers.focus_difficulty == "very_hard"
        or answers.attention_diagnosis == "yes_adhd"
        or (answers.focus_difficulty == "often" and answers.attention_diagnosis == "suspected")
    ):
        return Persona.LOW_FOCUS_SHORT_SESSION

    # 2. imminent exam with a request for strong guidance
    if answers.exam_proximity == "within_1m" and answers.guidance_level in ("strong", "decide_all"):
        return Persona.EXAM_DRIVEN_HIGH_PRESSURE

    # 3. burnout and abandonment signals
    if (
        answers.miss_day_response == "abandon"
        or answers.consistency_span == "1_2_days"
        or (answers.overload_response == "pause" and answers.main_drain == "stress")
    ):
        return Persona.BURNOUT_RECOVERY

    # 4. chronic overload
    if answers.main_drain == "too_many_tasks" and answers.overload_response in ("rush_stress", "avoid"):
        return Persona.CONSISTENT_OVERLOADED

    return Persona.BALANCED_LEARNER


PERSONA_DESCRIPTIONS = {
    Persona.LOW_FOCUS_SHORT_SESSION: "You work best with short, focused bursts of activity.",
    Persona.EXAM_DRIVEN_HIGH_PRESSURE: "You thrive under structure when preparing for important deadlines.",
    Persona.CONSISTENT_OVERLOADED: "You're managing a lot - pacing and prioritization are key.",
    Persona.BURNOUT_RECOVERY: "Taking it slow to rebuild your study habits sustainably.",
    Persona.BALANCED_LEARNER: "You have a steady, balanced approach to learning.",
}

RECOMMENDED_SESSION_MINUTES = {
    Persona.LOW_FOCUS_SHORT_SESSION: 20,
    Persona.EXAM_DRIVEN_HIGH_PRESSURE: 35,
    Persona.CONSISTENT_OVERLOADED: 25,
    Persona.BURNOUT_RECOVERY: 17,
    Persona.BALANCED_LEARNER: 25,
}


def describe_persona(persona: Persona) -> str:
    return PERSONA_DESCRIPTIONS[persona]


def recommended_session_minutes(persona: Persona) -> int:
    return RECOMMENDED_SESSION_MINUTES.get(persona, 25)
