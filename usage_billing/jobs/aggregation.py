"""
Aggregation Jobs
================
Price usage events and roll them up into billing summaries per period.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

import structlog

from usage_billing.core.aggregation import aggregate_costs
from usage_billing.core.cost import CostCalculator
from usage_billing.core.periods import BillingPeriod, DailyPeriod
from usage_billing.exceptions import PricingNotFoundError
from usage_billing.repositories import (
    BillingRepository,
    PricingRepository,
    UsageEventRepository,
)
from usage_billing.schemas.usage import CostResult, ModelPricing, UsageEvent

logger = structlog.get_logger()


@dataclass(frozen=True)
class AggregationResult:
    """Outcome of one aggregation run."""

    period_key: str
    summaries: int
    events: int
    unpriced_events: int = 0


class BillingAggregationJob:
    """
    Aggregate usage events into billing summaries for a period.

    Loads events through the usage repository, prices them with the cost
    calculator, and hands one summary per user to the billing repository.
    """

    def __init__(
        self,
        usage_repository: UsageEventRepository,
        pricing_repository: PricingRepository,
        billing_repository: BillingRepository,
        calculator: Optional[CostCalculator] = None,
    ):
        self.usage_repository = usage_repository
        self.pricing_repository = pricing_repository
        self.billing_repository = billing_repository
        self.calculator = calculator or CostCalculator()

    async def run(self, period: BillingPeriod) -> AggregationResult:
        """
        Run aggregation for a billing period.

        Events outside the period are ignored. Events whose model has no
        pricing are skipped and counted.

        Returns:
            Counts of summaries written and events priced/skipped
        """
        period_key = period.to_key()
        start, end = period.get_time_range()
        logger.info("Starting billing aggregation", period=period_key)

        events = await self.usage_repository.list_usage_events(start, end)
        events = [e for e in events if period.contains(e.timestamp)]
        priced, unpriced = self._price_events(events)

        if unpriced:
            logger.warning(
                "Skipped usage events without pricing",
                period=period_key,
                events=unpriced,
            )

        summaries = aggregate_costs(period, priced)
        if not summaries:
            logger.info("No data to aggregate", period=period_key)

        for summary in summaries:
            await self.billing_repository.save_billing_summary(summary)

        logger.info(
            "Billing aggregation completed",
            period=period_key,
            records=len(summaries),
            events=len(priced),
        )
        return AggregationResult(
            period_key=period_key,
            summaries=len(summaries),
            events=len(priced),
            unpriced_events=unpriced,
        )

    def _price_events(
        self,
        events: Iterable[UsageEvent],
    ) -> tuple[list[tuple[UsageEvent, CostResult]], int]:
        # One pricing lookup per model per run
        pricing_cache: dict[str, Optional[ModelPricing]] = {}
        priced = []
        unpriced = 0

        for event in events:
            if event.model_id not in pricing_cache:
                try:
                    pricing_cache[event.model_id] = self.pricing_repository.get_model_pricing(
                        event.model_id
                    )
                except PricingNotFoundError:
                    logger.warning("No pricing for model", model=event.model_id)
                    pricing_cache[event.model_id] = None

            pricing = pricing_cache[event.model_id]
            if pricing is None:
                unpriced += 1
                continue
            priced.append((event, self.calculator.calculate_cost(event, pricing)))

        return priced, unpriced

    async def backfill(self, periods: Iterable[BillingPeriod]) -> int:
        """
        Run aggregation for each period in order.

        Returns:
            Total number of summaries written
        """
        total = 0
        for period in periods:
            result = await self.run(period)
            total += result.summaries

        logger.info("Backfill completed", total=total)
        return total

    async def backfill_daily(self, start_date: date, end_date: date) -> int:
        """
        Backfill daily aggregations for a date range, both ends inclusive.
        """
        days = (end_date - start_date).days + 1
        periods = [DailyPeriod(start_date + timedelta(days=i)) for i in range(max(days, 0))]
        return await self.backfill(periods)
