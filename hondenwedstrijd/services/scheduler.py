import logging
import time

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from hondenwedstrijd.config import settings
from hondenwedstrijd.metrics import SCHEDULER_LAST_RUN
from hondenwedstrijd.services.calendar import CompetitionCalendar

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def start_scheduler(calendar: CompetitionCalendar) -> bool:
    """Start the daily refresh job; a no-op when no schedule is configured."""
    if not settings.refresh_schedule:
        logger.info("No refresh schedule configured, refreshing on demand only")
        return False
    hour, minute = settings.refresh_schedule.split(":")
    scheduler.add_job(
        _run_refresh_job,
        "cron",
        hour=int(hour),
        minute=int(minute),
        id="daily_refresh",
        replace_existing=True,
        args=[calendar],
    )
    scheduler.start()
    logger.info("Scheduler started: daily refresh at %s", settings.refresh_schedule)
    return True


def stop_scheduler():
    """Shut down the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")


async def _run_refresh_job(calendar: CompetitionCalendar):
    logger.info("Scheduled refresh starting")
    SCHEDULER_LAST_RUN.set(time.time())
    published = await calendar.refresh()
    logger.info("Scheduled refresh finished (published=%s)", published)
