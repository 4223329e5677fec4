"""Job manager for scheduling the monthly creator tier recompute."""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from config import settings

logger = logging.getLogger(__name__)

TIER_RECOMPUTE_JOB_ID = "tier_recompute"


class JobManager:
    """
    Manages scheduled background jobs.

    Uses APScheduler for async job scheduling.
    """

    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None):
        """Initialize the job manager."""
        self.scheduler = scheduler or AsyncIOScheduler(timezone="UTC")
        self._tier_callback: Optional[Callable[[], Awaitable]] = None
        self._is_running = False

    def set_tier_callback(self, callback: Callable[[], Awaitable]) -> None:
        """
        Set the coroutine function that recomputes creator tiers.

        Args:
            callback: Async function, typically TierService.recompute_all
        """
        self._tier_callback = callback

    async def _run_tier_recompute(self) -> None:
        try:
            stats = await self._tier_callback()
            logger.info(f"Scheduled tier recompute finished: {stats}")
        except Exception as e:
            logger.error(f"Scheduled tier recompute failed: {e}", exc_info=True)

    def start(self, day: Optional[int] = None, hour: Optional[int] = None) -> None:
        """
        Start the scheduler with a monthly tier recompute.

        Must be called from within a running event loop.

        Args:
            day: Day of month to run (default from settings)
            hour: Hour (UTC) to run (default from settings)
        """
        if not self._tier_callback:
            raise ValueError("Tier callback not set. Call set_tier_callback first.")

        if self._is_running:
            logger.warning("Scheduler is already running")
            return

        day = day if day is not None else settings.tier_recompute_day
        hour = hour if hour is not None else settings.tier_recompute_hour

        self.scheduler.add_job(
            self._run_tier_recompute,
            CronTrigger(day=day, hour=hour, minute=0, timezone="UTC"),
            id=TIER_RECOMPUTE_JOB_ID,
            name="Recompute creator tiers",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )

        self.scheduler.start()
        self._is_running = True

        logger.info(f"Scheduler started. Tier recompute on day {day} at {hour:02d}:00 UTC monthly.")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self._is_running:
            self.scheduler.shutdown(wait=False)
            self._is_running = False
            logger.info("Scheduler stopped")

    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._is_running

    def get_next_run_time(self) -> Optional[datetime]:
        """Get the next scheduled tier recompute time."""
        job = self.scheduler.get_job(TIER_RECOMPUTE_JOB_ID)
        if job:
            return job.next_run_time
        return None
