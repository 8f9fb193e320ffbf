"""Dedicated APScheduler worker that drains the offline sync queue."""
from __future__ import annotations

import logging
import signal
import threading

from apscheduler.schedulers.background import BackgroundScheduler

from studypace.core.config import settings
from studypace.core.logging import configure_logging
from studypace.services.sync_queue import SyncQueue, build_sync_queue


logger = logging.getLogger(__name__)

DRAIN_JOB_ID = "sync_queue_drain"


def main() -> None:
    configure_logging(log_level=settings.log_level)
    logger.info("Scheduler worker starting (enabled=%s)", settings.scheduler_enabled)

    queue = build_sync_queue(settings)
    scheduler = BackgroundScheduler(timezone=settings.scheduler_timezone)

    if settings.scheduler_enabled:
        register_jobs(scheduler, queue)
        scheduler.start()
        if settings.sync_drain_on_startup:
            logger.info("Draining sync queue once on startup")
            run_drain_job(queue)
    else:
        logger.warning("Scheduler disabled via config; worker will idle")

    stop_event = threading.Event()

    def shutdown(signum, frame):  # pragma: no cover - signal handler
        logger.info("Scheduler worker shutting down (signal=%s)", signum)
        if scheduler.running:
            scheduler.shutdown(wait=False)
        stop_event.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        stop_event.wait()
    except KeyboardInterrupt:  # pragma: no cover - manual stop
        shutdown(signal.SIGINT, None)


def register_jobs(scheduler: BackgroundScheduler, queue: SyncQueue) -> None:
    scheduler.add_job(
        run_drain_job,
        trigger="interval",
        seconds=settings.sync_drain_interval_seconds,
        args=[queue],
        id=DRAIN_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    logger.info(
        "Registered sync drain job (every %ss, key=%s)",
        settings.sync_drain_interval_seconds,
        settings.sync_queue_key,
    )


def run_drain_job(queue: SyncQueue) -> None:
    try:
        result = queue.drain()
    except Exception:  # pragma: no cover - keep the scheduler alive
        logger.exception("Sync drain job failed")
        return
    if result.skipped:
        logger.info("Sync drain skipped; another drain is running")
    else:
        logger.info(
            "Sync drain complete: processed=%s failed=%s dropped=%s",
            result.processed,
            result.failed,
            result.dropped,
        )


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
