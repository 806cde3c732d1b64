"""
Repository Protocols
====================
Interfaces the aggregation job expects from its storage collaborators.
"""

from datetime import datetime
from typing import Protocol

from usage_billing.schemas.usage import BillingSummary, ModelPricing, UsageEvent


class UsageEventRepository(Protocol):
    async def list_usage_events(self, start: datetime, end: datetime) -> list[UsageEvent]:
        """Return events with ``start <= timestamp <= end``."""
        ...


class PricingRepository(Protocol):
    def get_model_pricing(self, model_id: str) -> ModelPricing:
        """Return pricing for a model or raise ``PricingNotFoundError``."""
        ...


class BillingRepository(Protocol):
    async def save_billing_summary(self, summary: BillingSummary) -> None:
        """Create or replace the summary for its user and period key."""
        ...
