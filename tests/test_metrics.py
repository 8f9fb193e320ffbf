"""Tests for metrics and trace helpers."""
from __future__ import annotations

from typing import Any, Dict

import pytest

from studypace.core.context import request_id_ctx_var
from studypace.observability import metrics
from studypace.observability import tracing


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.error_info: Dict[str, Any] | None = None
        self.ended = False

    def update(self, error_info: Dict[str, Any] | None = None, **kwargs) -> None:
        self.error_info = error_info

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(name, metadata or {})
        self.traces.append(trace)
        return trace


@pytest.fixture()
def dummy_client(monkeypatch) -> _DummyClient:
    client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: client)
    return client


def test_log_metric_closes_trace(dummy_client) -> None:
    metrics.log_metric("demo_metric", 42, metadata={"foo": "bar", "skip": None})

    assert dummy_client.traces, "Metric call should record a trace"
    assert dummy_client.traces[0].name == "metric:demo_metric"
    assert dummy_client.traces[0].metadata["value"] == 42
    assert dummy_client.traces[0].metadata["foo"] == "bar"
    assert "skip" not in dummy_client.traces[0].metadata
    assert dummy_client.traces[0].ended is True


def test_trace_picks_up_bound_request_id(dummy_client) -> None:
    token = request_id_ctx_var.set("req-1")
    try:
        with tracing.trace("demo", user_id="u-1"):
            pass
    finally:
        request_id_ctx_var.reset(token)

    assert dummy_client.traces[0].metadata == {"user_id": "u-1", "request_id": "req-1"}


def test_trace_records_error_and_reraises(dummy_client) -> None:
    with pytest.raises(RuntimeError):
        with tracing.trace("failing"):
            raise RuntimeError("boom")

    assert dummy_client.traces[0].error_info["exception_type"] == "RuntimeError"
    assert dummy_client.traces[0].ended is True


def test_trace_yields_none_when_disabled(monkeypatch) -> None:
    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    with tracing.trace("disabled") as active:
        assert active is None
