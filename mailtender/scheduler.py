"""
APScheduler job runner for periodic mailbox scans.
"""

from datetime import datetime
from typing import Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from mailtender.core.logging import get_logger
from mailtender.processors.base import BaseProcessor

log = get_logger(__name__)


def scan_job(processor_factory: Callable[[], BaseProcessor]) -> None:
    """Scheduled job: run one full scan pass."""
    log.info("scheduled_job_starting", job="scan")
    try:
        processor = processor_factory()
        stats = processor.process()
        log.info("scheduled_job_complete", job="scan", **stats)
    except Exception as e:
        log.error("scheduled_job_error", job="scan", error=str(e))


def build_scheduler(
    processor_factory: Callable[[], BaseProcessor],
    interval_minutes: int,
) -> BlockingScheduler:
    """
    Create a scheduler that scans every interval_minutes, starting now.

    Only one scan runs at a time; missed runs are coalesced.

    Returns:
        The (not yet started) scheduler instance
    """
    scheduler = BlockingScheduler()
    scheduler.add_job(
        scan_job,
        trigger=IntervalTrigger(minutes=interval_minutes),
        args=[processor_factory],
        id="scan",
        name="Scan mailbox",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(),
    )
    return scheduler


def run_scheduler(processor_factory: Callable[[], BaseProcessor], interval_minutes: int) -> None:
    """Block, scanning periodically until interrupted."""
    scheduler = build_scheduler(processor_factory, interval_minutes)
    log.info("scheduler_started", interval_minutes=interval_minutes)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        log.info("scheduler_stopped")
