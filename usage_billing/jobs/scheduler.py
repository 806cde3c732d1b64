"""
Job Scheduler
=============
APScheduler-based scheduler for billing aggregation.
"""

import asyncio
from datetime import date, datetime, timezone
from typing import Optional

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from usage_billing.config import Settings, get_settings
from usage_billing.core.periods import DailyPeriod, MonthlyPeriod
from usage_billing.jobs.aggregation import AggregationResult, BillingAggregationJob
from usage_billing.logging import configure_logging

logger = structlog.get_logger()


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class JobScheduler:
    """
    Runs billing aggregation for the previous day and month on a cron schedule.
    """

    def __init__(self, job: BillingAggregationJob, settings: Optional[Settings] = None):
        self.job = job
        self.settings = settings or get_settings()
        self.scheduler = AsyncIOScheduler(timezone="UTC")

    async def run_daily_aggregation(self, today: Optional[date] = None) -> Optional[AggregationResult]:
        """Aggregate the day before ``today`` (current UTC date by default)."""
        period = DailyPeriod.containing(today or _utc_today()).previous()
        try:
            logger.info("Running scheduled daily aggregation", period=period.to_key())
            return await self.job.run(period)
        except Exception as e:
            logger.error("Daily aggregation failed", period=period.to_key(), error=str(e))
            return None

    async def run_monthly_aggregation(self, today: Optional[date] = None) -> Optional[AggregationResult]:
        """Aggregate the month before the month of ``today`` (UTC by default)."""
        period = MonthlyPeriod.containing(today or _utc_today()).previous()
        try:
            logger.info("Running scheduled monthly aggregation", period=period.to_key())
            return await self.job.run(period)
        except Exception as e:
            logger.error("Monthly aggregation failed", period=period.to_key(), error=str(e))
            return None

    def setup(self) -> None:
        """Configure scheduled jobs."""
        self.scheduler.add_job(
            self.run_daily_aggregation,
            CronTrigger(hour=self.settings.daily_aggregation_hour, minute=0, timezone="UTC"),
            id="daily_aggregation",
            name="Daily Billing Aggregation",
            replace_existing=True,
        )

        self.scheduler.add_job(
            self.run_monthly_aggregation,
            CronTrigger(
                day=self.settings.monthly_aggregation_day,
                hour=self.settings.monthly_aggregation_hour,
                minute=0,
                timezone="UTC",
            ),
            id="monthly_aggregation",
            name="Monthly Billing Aggregation",
            replace_existing=True,
        )

        logger.info(
            "Scheduler configured",
            daily_hour=self.settings.daily_aggregation_hour,
            monthly_day=self.settings.monthly_aggregation_day,
        )

    def start(self) -> None:
        """Start the scheduler."""
        self.scheduler.start()
        logger.info("Scheduler started")

    def stop(self) -> None:
        """Stop the scheduler."""
        self.scheduler.shutdown()
        logger.info("Scheduler stopped")


async def run_scheduler(job: BillingAggregationJob, settings: Optional[Settings] = None) -> None:
    """Run the job scheduler until cancelled."""
    settings = settings or get_settings()
    configure_logging(settings)

    if not settings.scheduler_enabled:
        logger.warning("Scheduler is disabled")
        return

    scheduler = JobScheduler(job, settings)
    scheduler.setup()
    scheduler.start()

    try:
        while True:
            await asyncio.sleep(60)
    finally:
        scheduler.stop()
