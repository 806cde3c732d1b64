"""
Pydantic Schemas
================
Value models exchanged between the billing engine and its callers.
"""

from usage_billing.schemas.usage import (
    BillingSummary,
    CostResult,
    ModelPricing,
    UsageEvent,
)

__all__ = [
    "UsageEvent",
    "ModelPricing",
    "CostResult",
    "BillingSummary",
]
