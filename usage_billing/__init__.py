"""
Usage Billing
=============
Token cost computation and billing period aggregation.
"""

from usage_billing.core.cost import CostCalculator, calculate_cost
from usage_billing.core.periods import (
    BillingPeriod,
    DailyPeriod,
    MonthlyPeriod,
    parse_period_key,
)
from usage_billing.schemas.usage import (
    BillingSummary,
    CostResult,
    ModelPricing,
    UsageEvent,
)

__version__ = "1.0.0"

__all__ = [
    "BillingPeriod",
    "BillingSummary",
    "CostCalculator",
    "CostResult",
    "DailyPeriod",
    "ModelPricing",
    "MonthlyPeriod",
    "UsageEvent",
    "calculate_cost",
    "parse_period_key",
]
