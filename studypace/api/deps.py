"""FastAPI dependencies for the core services."""
from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from studypace.db.deps import get_db
from studypace.services.core import CoreServices
from studypace.services.sync_queue import SyncQueue


def get_sync_queue(request: Request) -> SyncQueue:
    return request.app.state.sync_queue


def get_core_services(
    db: Session = Depends(get_db),
    queue: SyncQueue = Depends(get_sync_queue),
) -> CoreServices:
    return CoreServices.for_session(db, queue)


def request_id_of(request: Request) -> str:
    return getattr(request.state, "request_id", None) or ""
