"""Offline sync queue inspection and manual drain."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from studypace.api.deps import get_sync_queue, request_id_of
from studypace.api.schemas.sync import QueueItemOut, SyncDrainResponse, SyncStatusResponse
from studypace.observability.tracing import trace
from studypace.services.sync_queue import SyncQueue

router = APIRouter(prefix="/sync", tags=["sync"])


@router.get("/status", response_model=SyncStatusResponse)
def sync_status(request: Request, queue: SyncQueue = Depends(get_sync_queue)) -> SyncStatusResponse:
    items = queue.items()
    return SyncStatusResponse(
        pending=len(items),
        max_retries=queue.max_retries,
        items=[
            QueueItemOut(
                id=item.id,
                table=str(item.payload.get("table", "")),
                operation=str(item.payload.get("operation", "")),
                enqueued_at=item.enqueued_at,
                retry_count=item.retry_count,
            )
            for item in items
        ],
        request_id=request_id_of(request),
    )


@router.post("/drain", response_model=SyncDrainResponse)
def drain(request: Request, queue: SyncQueue = Depends(get_sync_queue)) -> SyncDrainResponse:
    request_id = request_id_of(request)
    with trace("sync.manual_drain", request_id=request_id):
        result = queue.drain()
    return SyncDrainResponse(
        processed=result.processed,
        failed=result.failed,
        dropped=result.dropped,
        skipped=result.skipped,
        pending=queue.pending_count(),
        request_id=request_id,
    )
