"""Main FastAPI application for the StudyPace core."""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from studypace.api.routes.capacity import router as capacity_router
from studypace.api.routes.focus_sessions import router as focus_sessions_router
from studypace.api.routes.profile import router as profile_router
from studypace.api.routes.readiness import router as readiness_router
from studypace.api.routes.smart_today import router as smart_today_router
from studypace.api.routes.sync import router as sync_router
from studypace.api.routes.task import router as task_router
from studypace.core.config import settings
from studypace.core.errors import (
    AuthenticationError,
    EntityNotFound,
    NetworkError,
    StudyPaceError,
    ValidationFailure,
)
from studypace.core.logging import configure_logging
from studypace.core.middleware import RequestIDMiddleware
from studypace.observability.client import init_opik
from studypace.observability.tracing import trace
from studypace.services.sync_queue import build_sync_queue

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(profile_router)
app.include_router(capacity_router)
app.include_router(task_router)
app.include_router(smart_today_router)
app.include_router(focus_sessions_router)
app.include_router(sync_router)
app.include_router(readiness_router)

_STATUS_BY_ERROR = (
    (ValidationFailure, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (EntityNotFound, status.HTTP_404_NOT_FOUND),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (NetworkError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


@app.exception_handler(StudyPaceError)
async def core_error_handler(request: Request, exc: StudyPaceError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    content = {
        "detail": str(exc),
        "category": exc.category.value,
        "request_id": getattr(request.state, "request_id", None) or "",
    }
    if isinstance(exc, ValidationFailure):
        content["issues"] = [{"loc": list(issue["loc"]), "msg": issue["msg"]} for issue in exc.issues]
    return JSONResponse(status_code=status_code, content=content)


@app.on_event("startup")
async def startup_services() -> None:
    """Initialize observability and the offline queue after the event loop starts."""
    init_opik()
    if not hasattr(app.state, "sync_queue"):
        app.state.sync_queue = build_sync_queue(settings)
    if settings.sync_drain_on_startup:
        app.state.sync_queue.drain()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload so automation can probe the API."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
