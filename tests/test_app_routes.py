"""Regression tests for application route registration."""
from collections import Counter

from fastapi.routing import APIRoute

from studypace.main import app


def test_core_routes_registered_once() -> None:
    """Ensure each endpoint is mounted exactly once."""
    mounted = Counter(
        (route.path, method)
        for route in app.routes
        if isinstance(route, APIRoute)
        for method in route.methods
    )
    expected = [
        ("/health", "GET"),
        ("/profile", "PUT"),
        ("/profile", "GET"),
        ("/plans", "GET"),
        ("/plans/{plan_id}", "GET"),
        ("/capacity", "GET"),
        ("/capacity", "PATCH"),
        ("/capacity/usage", "GET"),
        ("/capacity/overrides", "POST"),
        ("/capacity/recalculate", "POST"),
        ("/tasks", "POST"),
        ("/tasks/{task_id}/toggle", "POST"),
        ("/smart-today", "GET"),
        ("/missed-tasks", "GET"),
        ("/missed-tasks/{task_id}/reschedule", "POST"),
        ("/missed-tasks/{task_id}/skip", "POST"),
        ("/focus-sessions", "POST"),
        ("/sync/status", "GET"),
        ("/sync/drain", "POST"),
        ("/readiness", "POST"),
    ]
    for key in expected:
        assert mounted[key] == 1, key
