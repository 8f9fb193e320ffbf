"""Readiness score for today's health metrics."""
from __future__ import annotations

from fastapi import APIRouter, Request

from studypace.api.deps import request_id_of
from studypace.api.schemas.readiness import ReadinessRequest, ReadinessResponse
from studypace.observability.tracing import trace
from studypace.services.readiness import HealthMetrics, readiness_for_today, update_baseline

router = APIRouter(prefix="/readiness", tags=["readiness"])


class SubmittedMetrics:
    """Metrics posted by the client, served through the provider interface."""

    def __init__(self, metrics: HealthMetrics):
        self.metrics = metrics

    def fetch_day_metrics(self) -> HealthMetrics:
        return self.metrics


@router.post("", response_model=ReadinessResponse)
def readiness(payload: ReadinessRequest, request: Request) -> ReadinessResponse:
    """Score today against the caller's baseline and return the baseline with today folded in."""
    request_id = request_id_of(request)
    with trace(
        "readiness.calculate",
        metadata={"days_collected": payload.baseline.days_collected},
        request_id=request_id,
    ):
        result = readiness_for_today(SubmittedMetrics(payload.metrics), payload.baseline)
    return ReadinessResponse(
        **result.model_dump(),
        baseline=update_baseline(payload.baseline, payload.metrics),
        request_id=request_id,
    )
