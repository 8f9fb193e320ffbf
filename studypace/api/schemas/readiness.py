"""Schemas for the daily readiness check."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from studypace.services.readiness import HealthBaseline, HealthMetrics, MentalLoad


class ReadinessRequest(BaseModel):
    metrics: HealthMetrics
    baseline: HealthBaseline = Field(default_factory=HealthBaseline)


class ReadinessResponse(BaseModel):
    readiness_score: int
    mental_load: MentalLoad
    is_calibrating: bool
    notes: List[str]
    baseline: HealthBaseline
    request_id: str
