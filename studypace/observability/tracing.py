"""Trace spans around core operations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from studypace.core.context import get_request_id
from studypace.observability import client as opik_client

if TYPE_CHECKING:  # pragma: no cover
    from opik.api_objects.trace.trace_client import Trace

logger = logging.getLogger(__name__)


def get_opik_client():
    return opik_client.get_opik_client()


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """Open an Opik trace for the enclosed block.

    Yields ``None`` when tracing is off. The request id falls back to the one
    bound by ``RequestIDMiddleware`` so service code rarely has to pass it.
    Errors raised inside the block are attached to the trace and re-raised.
    """
    client = get_opik_client()
    active: Optional["Trace"] = None

    if client:
        fields = dict(metadata or {})
        if user_id:
            fields.setdefault("user_id", str(user_id))
        request_id = request_id or get_request_id()
        if request_id:
            fields.setdefault("request_id", request_id)
        try:
            active = client.trace(name=name, metadata=fields or None)
        except Exception as exc:  # pragma: no cover - remote failure
            logger.debug("Could not open trace %s: %s", name, exc)
            active = None

    try:
        yield active
    except Exception as exc:
        if active:
            try:
                active.update(error_info={"exception_type": type(exc).__name__, "message": str(exc)})
            except Exception:  # pragma: no cover
                logger.debug("Could not attach error to trace %s", name, exc_info=True)
        raise
    finally:
        if active:
            try:
                active.end()
            except Exception:  # pragma: no cover
                logger.debug("Could not close trace %s", name, exc_info=True)
