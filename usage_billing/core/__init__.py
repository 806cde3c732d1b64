"""
Core Business Logic
====================
Token cost calculation, billing periods and pricing.
"""

from usage_billing.core.aggregation import aggregate_costs
from usage_billing.core.cost import CostCalculator, calculate_cost
from usage_billing.core.periods import (
    BillingPeriod,
    DailyPeriod,
    MonthlyPeriod,
    parse_period_key,
)
from usage_billing.core.pricing import PricingCatalog, get_pricing_catalog

__all__ = [
    "BillingPeriod",
    "CostCalculator",
    "DailyPeriod",
    "MonthlyPeriod",
    "PricingCatalog",
    "aggregate_costs",
    "calculate_cost",
    "get_pricing_catalog",
    "parse_period_key",
]
