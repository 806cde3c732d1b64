"""
Exceptions
==========
Errors raised by the billing engine.
"""


class UsageBillingError(Exception):
    """Base class for all usage billing errors."""


class InvalidPeriodError(UsageBillingError, ValueError):
    """A billing period was constructed from out-of-range fields."""


class PricingNotFoundError(UsageBillingError, LookupError):
    """No pricing is known for the requested model."""

    def __init__(self, model_id: str):
        self.model_id = model_id
        super().__init__(f"No pricing configured for model: {model_id}")
