"""Counters and gauges recorded as short Opik traces."""
from __future__ import annotations

from typing import Any, Dict, Optional

from studypace.observability.tracing import trace


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record ``value`` under ``metric:<name>``; silently skipped when Opik is off."""
    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update({key: val for key, val in metadata.items() if val is not None})
    with trace(f"metric:{name}", metadata=payload):
        pass
