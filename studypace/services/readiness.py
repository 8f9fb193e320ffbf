"""Readiness score from daily health metrics against a personal baseline."""
from __future__ import annotations

from typing import List, Literal, Protocol

from pydantic import BaseModel, Field

MentalLoad = Literal["low", "medium", "high"]

CALIBRATION_DAYS = 3
CALIBRATING_SCORE = 85
SCORE_FLOOR = 40
SCORE_CEILING = 95


class HealthMetrics(BaseModel):
    sleep_hours: float = 0
    hrv: float = 0
    steps: int = 0
    stand_hours: float = 0


class HealthBaseline(BaseModel):
    avg_sleep: float = 0
    avg_hrv: float = 0
    days_collected: int = 0


class ReadinessResult(BaseModel):
    readiness_score: int = Field(ge=0, le=100)
    mental_load: MentalLoad
    is_calibrating: bool
    notes: List[str] = Field(default_factory=list)


class HealthMetricsProvider(Protocol):
    def fetch_day_metrics(self) -> HealthMetrics:
        ...


def mental_load_from_score(score: int) -> MentalLoad:
    if score < 60:
        return "high"
    if score < 80:
        return "medium"
    return "low"


def calculate_readiness(metrics: HealthMetrics, baseline: HealthBaseline) -> ReadinessResult:
    if baseline.days_collected < CALIBRATION_DAYS:
        return ReadinessResult(
            readiness_score=CALIBRATING_SCORE,
            mental_load="low",
            is_calibrating=True,
            notes=["Learning your rhythm... recommendations will improve over time."],
        )

    notes: List[str] = []
    score = 100
    if metrics.sleep_hours < baseline.avg_sleep * 0.8:
        score -= 20
        notes.append("Sleep was lower than your usual.")
    elif metrics.sleep_hours < 6:
        score -= 10
        notes.append("Short sleep detected.")

    # 0 means no reading
    if 0 < metrics.hrv < baseline.avg_hrv * 0.85:
        score -= 15
        notes.append("Recovery (HRV) signals are lower today.")

    score = max(SCORE_FLOOR, min(SCORE_CEILING, score))
    return ReadinessResult(
        readiness_score=score,
        mental_load=mental_load_from_score(score),
        is_calibrating=False,
        notes=notes,
    )


def update_baseline(baseline: HealthBaseline, metrics: HealthMetrics) -> HealthBaseline:
    """Fold one day of metrics into the running means."""
    days = baseline.days_collected
    avg_hrv = baseline.avg_hrv
    if metrics.hrv > 0:
        avg_hrv = (baseline.avg_hrv * days + metrics.hrv) / (days + 1)
    return HealthBaseline(
        avg_sleep=(baseline.avg_sleep * days + metrics.sleep_hours) / (days + 1),
        avg_hrv=avg_hrv,
        days_collected=days + 1,
    )


def readiness_for_today(provider: HealthMetricsProvider, baseline: HealthBaseline) -> ReadinessResult:
    return calculate_readiness(provider.fetch_day_metrics(), baseline)
