"""Static adaptive plan catalog and persona-driven plan selection."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from studypace.core.errors import ValidationFailure
from studypace.services.persona import Persona


class PlanId(str, Enum):
    ULTRA_LIGHT_CONSISTENCY = "ultra_light_consistency"
    ATTENTION_FRIENDLY = "attention_friendly"
    BALANCED_DAILY = "balanced_daily"
    DEEP_FOCUS = "deep_focus"
    EXAM_COUNTDOWN = "exam_countdown"
    BURNOUT_RECOVERY = "burnout_recovery"
    NIGHT_OWL = "night_owl"
    SURVIVAL_MODE = "survival_mode"


class AdaptivePlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: PlanId
    name: str
    emoji: str
    description: str
    category: str
    session_length_min: int
    session_length_max: int
    default_session_length: int
    break_duration: int
    max_sessions_per_day: int
    daily_task_limit: int
    task_size_guidance: Literal["very_small", "small", "medium", "large"]
    smart_warnings: Tuple[str, ...]
    analytics_tone: Literal["encouraging", "neutral", "data_driven", "hidden"]
    auto_reschedule_missed: bool
    require_session_quality: bool
    break_frequency: int
    auto_pause_on_background: bool = False
    hide_analytics: bool = False
    suppress_morning_reminders: bool = False


ADAPTIVE_PLANS: Tuple[AdaptivePlan, ...] = (
    AdaptivePlan(
        id=PlanId.ULTRA_LIGHT_CONSISTENCY,
        name="Ultra-Light Consistency",
        emoji="🌱",
        description="Build habits slowly without pressure",
        category="Low consistency + overwhelmed",
        session_length_min=15,
        session_length_max=15,
        default_session_length=15,
        break_duration=5,
        max_sessions_per_day=2,
        daily_task_limit=3,
        task_size_guidance="very_small",
        smart_warnings=(
            "Don't add more than 3 tasks today",
            "Consistency matters more than finishing everything",
        ),
        analytics_tone="encouraging",
        auto_reschedule_missed=True,
        require_session_quality=False,
        break_frequency=60,
    ),
    AdaptivePlan(
        id=PlanId.ATTENTION_FRIENDLY,
        name="Attention-Friendly",
        emoji="⚡",
        description="ADHD-safe short sessions with strong support",
        category="High distraction / ADHD",
        session_length_min=20,
        session_length_max=20,
        default_session_length=20,
        break_duration=7,
        max_sessions_per_day=3,
        daily_task_limit=4,
        task_size_guidance="small",
        smart_warnings=(
            "Short sessions work better for you",
            "Stop when focus drops, don't push",
        ),
        analytics_tone="encouraging",
        auto_reschedule_missed=True,
        require_session_quality=False,
        break_frequency=45,
        auto_pause_on_background=True,
    ),
    AdaptivePlan(
        id=PlanId.BALANCED_DAILY,
        name="Balanced Daily",
        emoji="⚖️",
        description="Standard approach for consistent learners",
        category="Average focus + moderate consistency",
        session_length_min=25,
        session_length_max=25,
        default_session_length=25,
        break_duration=5,
        max_sessions_per_day=4,
        daily_task_limit=6,
        task_size_guidance="medium",
        smart_warnings=("If tasks spill over twice, reduce tomorrow's load",),
        analytics_tone="neutral",
        auto_reschedule_missed=False,
        require_session_quality=False,
        break_frequency=60,
    ),
    AdaptivePlan(
        id=PlanId.DEEP_FOCUS,
        name="Deep Focus",
        emoji="🎯",
        description="Long intensive sessions for strong concentration",
        category="Strong focus + deep work",
        session_length_min=50,
        session_length_max=50,
        default_session_length=50,
        break_duration=10,
        max_sessions_per_day=3,
        daily_task_limit=5,
        task_size_guidance="large",
        smart_warnings=("Watch for burnout", "Take breaks seriously"),
        analytics_tone="data_driven",
        auto_reschedule_missed=False,
        require_session_quality=True,
        break_frequency=90,
    ),
    AdaptivePlan(
        id=PlanId.EXAM_COUNTDOWN,
        name="Exam Countdown",
        emoji="📚",
        description="Intensive prep for upcoming exams",
        category="Exam within 1-3 months",
        session_length_min=30,
        session_length_max=40,
        default_session_length=35,
        break_duration=7,
        max_sessions_per_day=5,
        daily_task_limit=7,
        task_size_guidance="medium",
        smart_warnings=(
            "Focus on exam-linked tasks only",
            "Avoid adding new topics unnecessarily",
        ),
        analytics_tone="data_driven",
        auto_reschedule_missed=False,
        require_session_quality=True,
        break_frequency=60,
    ),
    AdaptivePlan(
        id=PlanId.BURNOUT_RECOVERY,
        name="Burnout Recovery",
        emoji="💚",
        description="Gentle rebuild after stress or burnout",
        category="Stress / anxiety / avoidance",
        session_length_min=15,
        session_length_max=20,
        default_session_length=17,
        break_duration=10,
        max_sessions_per_day=2,
        daily_task_limit=3,
        task_size_guidance="very_small",
        smart_warnings=("It's okay to do less today", "Recovery is progress"),
        analytics_tone="encouraging",
        auto_reschedule_missed=True,
        require_session_quality=False,
        break_frequency=45,
    ),
    AdaptivePlan(
        id=PlanId.NIGHT_OWL,
        name="Night-Owl",
        emoji="🌙",
        description="Optimized for evening/night productivity",
        category="Peak energy at night",
        session_length_min=25,
        session_length_max=40,
        default_session_length=30,
        break_duration=7,
        max_sessions_per_day=4,
        daily_task_limit=6,
        task_size_guidance="medium",
        smart_warnings=(
            "Avoid starting new heavy tasks after 11 PM",
            "Wind down before sleep",
        ),
        analytics_tone="neutral",
        auto_reschedule_missed=False,
        require_session_quality=False,
        break_frequency=60,
        suppress_morning_reminders=True,
    ),
    AdaptivePlan(
        id=PlanId.SURVIVAL_MODE,
        name="Survival Mode",
        emoji="🆘",
        description="For extremely tough weeks - just show up",
        category="Extreme inconsistency / crisis",
        session_length_min=10,
        session_length_max=10,
        default_session_length=10,
        break_duration=5,
        max_sessions_per_day=2,
        daily_task_limit=2,
        task_size_guidance="very_small",
        smart_warnings=("One task is enough today", "Show up, that's the win"),
        analytics_tone="hidden",
        auto_reschedule_missed=True,
        require_session_quality=False,
        break_frequency=30,
        auto_pause_on_background=True,
        hide_analytics=True,
    ),
)

_PLANS_BY_ID: Dict[PlanId, AdaptivePlan] = {plan.id: plan for plan in ADAPTIVE_PLANS}

PERSONA_PLANS: Dict[Persona, PlanId] = {
    Persona.LOW_FOCUS_SHORT_SESSION: PlanId.ATTENTION_FRIENDLY,
    Persona.EXAM_DRIVEN_HIGH_PRESSURE: PlanId.EXAM_COUNTDOWN,
    Persona.CONSISTENT_OVERLOADED: PlanId.BALANCED_DAILY,
    Persona.BURNOUT_RECOVERY: PlanId.BURNOUT_RECOVERY,
    Persona.BALANCED_LEARNER: PlanId.BALANCED_DAILY,
}

FALLBACK_PLAN_ID = PlanId.BALANCED_DAILY
# Backfill order when secondary signals yield fewer than two alternates.
DEFAULT_ALTERNATES = (PlanId.BALANCED_DAILY, PlanId.BURNOUT_RECOVERY)
MAX_ALTERNATES = 2


def get_plan(plan_id: str | PlanId) -> AdaptivePlan:
    try:
        return _PLANS_BY_ID[PlanId(plan_id)]
    except (ValueError, KeyError):
        raise ValidationFailure(f"Unknown plan: {plan_id}") from None


def select_best_plan(persona: Persona) -> AdaptivePlan:
    plan_id = PERSONA_PLANS.get(persona, FALLBACK_PLAN_ID)
    return _PLANS_BY_ID.get(plan_id) or _PLANS_BY_ID[FALLBACK_PLAN_ID]


def recommend_plans(
    persona: Persona,
    *,
    focus_difficulty: Optional[str] = None,
    consistency_span: Optional[str] = None,
    peak_energy_time: Optional[str] = None,
) -> List[AdaptivePlan]:
    """Return the primary plan followed by up to two alternates."""
    primary = select_best_plan(persona)
    alternates: List[PlanId] = []

    signals = (
        (focus_difficulty == "very_hard", PlanId.ATTENTION_FRIENDLY),
        (consistency_span == "1_2_days", PlanId.ULTRA_LIGHT_CONSISTENCY),
        (peak_energy_time == "night", PlanId.NIGHT_OWL),
    )
    for matched, plan_id in signals:
        if matched and plan_id != primary.id:
            alternates.append(plan_id)

    for plan_id in DEFAULT_ALTERNATES:
        if len(alternates) >= MAX_ALTERNATES:
            break
        if plan_id != primary.id and plan_id not in alternates:
            alternates.append(plan_id)

    return [primary, *(_PLANS_BY_ID[plan_id] for plan_id in alternates[:MAX_ALTERNATES])]
