"""Durable offline write queue with bounded retries.

Writes that fail because the backend is unreachable are stored as
``QueueItem`` records in local storage and replayed by ``SyncQueue.drain``.
Every item is retried until it succeeds or reaches ``max_retries`` failed
attempts, at which point it is dropped with a warning.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional
from uuid import uuid4

from filelock import Timeout
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from studypace.db.session import SessionLocal
from studypace.db.store import RelationalStore, WriteIntent
from studypace.observability.metrics import log_metric
from studypace.observability.tracing import trace
from studypace.services.local_storage import FileLocalStorage, LocalStorage

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_KEY = "offline_queue"
DEFAULT_MAX_RETRIES = 5

Writer = Callable[[Dict[str, Any]], Any]


class QueueItem(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    payload: Dict[str, Any]
    enqueued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    retry_count: int = 0


_ITEMS = TypeAdapter(List[QueueItem])


@dataclass
class DrainResult:
    processed: int = 0
    failed: int = 0
    dropped: int = 0
    skipped: bool = False


class SyncQueue:
    """Queue of pending backend writes persisted in ``storage`` under ``key``."""

    def __init__(
        self,
        storage: LocalStorage,
        writer: Writer,
        *,
        key: str = DEFAULT_QUEUE_KEY,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        self.storage = storage
        self.writer = writer
        self.key = key
        self.max_retries = max_retries
        self._drain_lock = threading.Lock()
        self._storage_lock = threading.RLock()
        # shared with other processes using the same storage directory
        self._drain_file_lock = storage.lock_file(f"{key}.drain")
        self._storage_file_lock = storage.lock_file(key)

    def enqueue(self, payload: WriteIntent | Dict[str, Any]) -> QueueItem:
        if isinstance(payload, WriteIntent):
            payload = payload.model_dump(mode="json")
        item = QueueItem(payload=payload)
        with self._locked_storage():
            items = self._load()
            items.append(item)
            self._save(items)
        logger.info("Queued offline write %s (pending=%s)", item.id, len(items))
        log_metric("sync_queue.enqueued", 1, metadata={"table": payload.get("table")})
        return item

    def items(self) -> List[QueueItem]:
        with self._locked_storage():
            return self._load()

    def pending_count(self) -> int:
        return len(self.items())

    def clear(self) -> None:
        with self._locked_storage():
            self._save([])
        logger.info("Offline queue cleared")

    def drain(self) -> DrainResult:
        """Replay every queued write once.

        Only one drain runs at a time; a caller that finds a drain in flight
        returns immediately with ``skipped=True``. Items enqueued while a
        drain runs are picked up by the next drain.
        """
        if not self._drain_lock.acquire(blocking=False):
            logger.debug("Drain already in flight; skipping")
            return DrainResult(skipped=True)
        try:
            if self._drain_file_lock is None:
                return self._drain_once()
            try:
                self._drain_file_lock.acquire(timeout=0)
            except Timeout:
                logger.debug("Drain running in another process; skipping")
                return DrainResult(skipped=True)
            try:
                return self._drain_once()
            finally:
                self._drain_file_lock.release()
        finally:
            self._drain_lock.release()

    @contextmanager
    def _locked_storage(self) -> Iterator[None]:
        with self._storage_lock:
            if self._storage_file_lock is None:
                yield
                return
            with self._storage_file_lock:
                yield

    def _drain_once(self) -> DrainResult:
        result = DrainResult()
        snapshot = self.items()
        if not snapshot:
            return result

        with trace("sync_queue.drain", metadata={"pending": len(snapshot)}):
            for item in snapshot:
                try:
                    self.writer(item.payload)
                except Exception as exc:
                    retries = item.retry_count + 1
                    if retries >= self.max_retries:
                        self._remove(item.id)
                        result.dropped += 1
                        logger.warning(
                            "Dropping offline write %s after %s failed attempts: %s payload=%s",
                            item.id,
                            retries,
                            exc,
                            item.payload,
                        )
                        log_metric("sync_queue.dropped", 1, metadata={"table": item.payload.get("table")})
                    else:
                        self._set_retry_count(item.id, retries)
                        result.failed += 1
                        logger.info("Offline write %s failed (attempt %s): %s", item.id, retries, exc)
                    continue
                self._remove(item.id)
                result.processed += 1

        logger.info(
            "Drain finished processed=%s failed=%s dropped=%s",
            result.processed,
            result.failed,
            result.dropped,
        )
        log_metric("sync_queue.processed", result.processed)
        return result

    def _remove(self, item_id: str) -> None:
        with self._locked_storage():
            self._save([item for item in self._load() if item.id != item_id])

    def _set_retry_count(self, item_id: str, retry_count: int) -> None:
        with self._locked_storage():
            items = self._load()
            for item in items:
                if item.id == item_id:
                    item.retry_count = retry_count
            self._save(items)

    def _load(self) -> List[QueueItem]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        try:
            return _ITEMS.validate_json(raw)
        except ValidationError as exc:
            logger.error("Offline queue %s is unreadable, starting empty: %s", self.key, exc)
            return []

    def _save(self, items: List[QueueItem]) -> None:
        self.storage.set(self.key, _ITEMS.dump_json(items))


def backend_writer(session_factory: Optional[Callable[[], Any]] = None) -> Writer:
    """Writer that replays a serialized ``WriteIntent`` in a fresh session."""
    factory = session_factory or SessionLocal

    def write(payload: Dict[str, Any]) -> Any:
        intent = WriteIntent.model_validate(payload)
        db = factory()
        try:
            return RelationalStore(db).apply(intent)
        finally:
            db.close()

    return write


def build_sync_queue(settings) -> SyncQueue:
    """Queue persisted under ``settings.sync_storage_dir`` and replayed against the database."""
    return SyncQueue(
        FileLocalStorage(settings.sync_storage_dir),
        backend_writer(),
        key=settings.sync_queue_key,
        max_retries=settings.sync_max_retries,
    )
