#!/usr/bin/env python3
"""Entry point for the Reach payout core service."""

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables before importing settings
load_dotenv()

from config import settings
from core.analytics import SocialAnalyticsClient
from database.connection import Database
from jobs import JobManager
from services import TierService


# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("apscheduler").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


async def main():
    """Initialize storage and collaborators, then run scheduled jobs."""
    logger.info("Starting Reach payout core...")

    # Ensure data directory exists
    Path(settings.database_path).parent.mkdir(parents=True, exist_ok=True)

    # Initialize database
    db = Database(settings.database_path)
    await db.initialize()
    logger.info("Database initialized")

    analytics_client = SocialAnalyticsClient()
    tier_service = TierService(db, analytics_client=analytics_client)

    job_manager = JobManager()
    job_manager.set_tier_callback(tier_service.recompute_all)
    job_manager.start()
    logger.info(f"Next tier recompute: {job_manager.get_next_run_time()}")

    logger.info("Service is running. Press Ctrl+C to stop.")
    try:
        while True:
            await asyncio.sleep(1)
    except asyncio.CancelledError:
        pass
    finally:
        job_manager.stop()
        await analytics_client.close()
        await db.close()
        logger.info("Shutdown complete")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Service stopped by user")
    except Exception as e:
        logger.error(f"Service crashed: {e}")
        raise
