"""Tests ensuring observability wiring is safe by default."""
from __future__ import annotations

import pytest

from studypace.core.config import settings
from studypace.observability import client as client_module


class _DummyOpik:
    instances = 0

    def __init__(self, *args, **kwargs):
        _DummyOpik.instances += 1
        self.kwargs = kwargs


@pytest.fixture(autouse=True)
def fresh_client(monkeypatch):
    monkeypatch.setattr(client_module, "Opik", _DummyOpik)
    _DummyOpik.instances = 0
    client_module.reset_opik_client()
    yield
    client_module.reset_opik_client()


def test_disabled_by_default(monkeypatch) -> None:
    monkeypatch.setattr(settings, "opik_enabled", False)

    assert client_module.init_opik() is None
    assert _DummyOpik.instances == 0


def test_enabled_without_key_stays_off(monkeypatch) -> None:
    monkeypatch.setattr(settings, "opik_enabled", True)
    monkeypatch.setattr(settings, "opik_api_key", None)

    assert client_module.get_opik_client() is None


def test_enabled_client_is_cached(monkeypatch) -> None:
    monkeypatch.setattr(settings, "opik_enabled", True)
    monkeypatch.setattr(settings, "opik_api_key", "key")
    monkeypatch.setattr(settings, "opik_project", "studypace-test")

    first = client_module.get_opik_client()
    second = client_module.get_opik_client()

    assert first is second
    assert first.kwargs == {"project_name": "studypace-test", "api_key": "key"}
    assert _DummyOpik.instances == 1


def test_app_serves_with_opik_disabled(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "opik_enabled", False)

    assert client.get("/health").status_code == 200
