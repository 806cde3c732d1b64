"""
Test Configuration
==================
Pytest fixtures for the usage billing tests.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from usage_billing.exceptions import PricingNotFoundError
from usage_billing.schemas.usage import BillingSummary, ModelPricing, UsageEvent


class InMemoryUsageEventRepository:
    """Usage event source backed by a list."""

    def __init__(self, events: list[UsageEvent] | None = None):
        self.events = list(events or [])
        self.queries: list[tuple[datetime, datetime]] = []

    async def list_usage_events(self, start: datetime, end: datetime) -> list[UsageEvent]:
        self.queries.append((start, end))
        return [e for e in self.events if start <= e.timestamp <= end]


class InMemoryPricingRepository:
    """Pricing source backed by a dict, counting lookups."""

    def __init__(self, prices: dict[str, ModelPricing]):
        self.prices = prices
        self.lookups: list[str] = []

    def get_model_pricing(self, model_id: str) -> ModelPricing:
        self.lookups.append(model_id)
        if model_id not in self.prices:
            raise PricingNotFoundError(model_id)
        return self.prices[model_id]


class InMemoryBillingRepository:
    """Billing sink keyed by (user_id, period_key)."""

    def __init__(self):
        self.summaries: dict[tuple[str, str], BillingSummary] = {}

    async def save_billing_summary(self, summary: BillingSummary) -> None:
        self.summaries[(summary.user_id, summary.period_key)] = summary


@pytest.fixture
def pricing() -> ModelPricing:
    """Pricing used by the basic cost cases."""
    return ModelPricing(
        model_id="test-model",
        input_token_price=Decimal("0.001"),
        output_token_price=Decimal("0.002"),
    )


@pytest.fixture
def pricing_repository(pricing: ModelPricing) -> InMemoryPricingRepository:
    return InMemoryPricingRepository({
        "test-model": pricing,
        "gemini-2.5-flash-lite": ModelPricing(
            model_id="gemini-2.5-flash-lite",
            input_token_price=Decimal("0.0000001"),
            output_token_price=Decimal("0.0000004"),
        ),
    })


@pytest.fixture
def billing_repository() -> InMemoryBillingRepository:
    return InMemoryBillingRepository()


@pytest.fixture
def sample_events() -> list[UsageEvent]:
    """Usage events spread over two days of January 2025 and one in February."""
    return [
        UsageEvent(
            user_id="alice",
            model_id="test-model",
            timestamp=datetime(2025, 1, 15, 0, 0, tzinfo=timezone.utc),
            input_tokens=1000,
            output_tokens=500,
        ),
        UsageEvent(
            user_id="alice",
            model_id="gemini-2.5-flash-lite",
            timestamp=datetime(2025, 1, 15, 23, 59, 59, 999999, tzinfo=timezone.utc),
            input_tokens=38,
        ),
        UsageEvent(
            user_id="bob",
            model_id="test-model",
            timestamp=datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
            output_tokens=500,
        ),
        UsageEvent(
            user_id="bob",
            model_id="test-model",
            timestamp=datetime(2025, 1, 16, 0, 0, tzinfo=timezone.utc),
            input_tokens=10,
            output_tokens=10,
        ),
        UsageEvent(
            user_id="carol",
            model_id="unknown-model",
            timestamp=datetime(2025, 1, 15, 8, 0, tzinfo=timezone.utc),
            input_tokens=100,
        ),
        UsageEvent(
            user_id="alice",
            model_id="test-model",
            timestamp=datetime(2025, 2, 1, 0, 0, tzinfo=timezone.utc),
            input_tokens=1,
        ),
    ]


@pytest.fixture
def usage_repository(sample_events: list[UsageEvent]) -> InMemoryUsageEventRepository:
    return InMemoryUsageEventRepository(sample_events)
