"""Background job scheduler for database snapshots."""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.core.persistence import bridge

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def snapshot_job():
    """Periodic snapshot job.

    A coroutine so it runs on the event loop like the route handlers and
    their dependencies, instead of in the executor's thread pool.
    """
    if bridge.save_snapshot():
        logger.debug("Periodic snapshot completed")


def start_scheduler():
    """Start the background scheduler."""
    scheduler.add_job(
        snapshot_job,
        trigger=IntervalTrigger(seconds=settings.snapshot_interval_seconds),
        id="database_snapshot",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started, saving a snapshot every {settings.snapshot_interval_seconds} seconds"
    )


def shutdown_scheduler():
    """Graceful shutdown."""
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down")
