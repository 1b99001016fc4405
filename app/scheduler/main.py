"""Periodic price tick and hourly news scheduler."""
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from app.services.ticker_service import TickerService

logger = logging.getLogger(__name__)


class TickerScheduler:
    """Drives TickerService on two fixed intervals."""

    def __init__(
        self,
        service: TickerService,
        tick_interval_seconds: int = 60,
        news_check_interval_seconds: int = 60
    ):
        logger.debug("Creating AsyncIOScheduler instance")
        self.service = service
        self.tick_interval_seconds = tick_interval_seconds
        self.news_check_interval_seconds = news_check_interval_seconds
        self.scheduler = AsyncIOScheduler()

    async def run_tick(self):
        """Scheduled price update; errors are logged so the timer keeps firing."""
        try:
            await self.service.tick()
        except Exception as e:
            logger.error(f"Error during price tick: {e}", exc_info=True)

    async def run_news_check(self):
        """Scheduled hourly news check."""
        try:
            await self.service.check_news()
        except Exception as e:
            logger.error(f"Error during news check: {e}", exc_info=True)

    def start(self):
        """Register both jobs and start the scheduler (requires a running loop)."""
        logger.info("="*60)
        logger.info("Starting ticker scheduler...")
        logger.info(f"Price tick: every {self.tick_interval_seconds} seconds")
        logger.info(f"News check: every {self.news_check_interval_seconds} seconds")
        logger.info("="*60)

        # A missed tick is skipped, never replayed
        self.scheduler.add_job(
            self.run_tick,
            trigger=IntervalTrigger(seconds=self.tick_interval_seconds),
            id="price_tick",
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )

        self.scheduler.add_job(
            self.run_news_check,
            trigger=IntervalTrigger(seconds=self.news_check_interval_seconds),
            id="news_check",
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )

        self.scheduler.start()
        logger.info("Scheduler started successfully")

    def shutdown(self):
        """Stop timers; in-flight jobs are not awaited."""
        if self.scheduler.running:
            logger.info("Shutting down scheduler...")
            self.scheduler.shutdown(wait=False)
