"""
Token Cost Calculator
=====================
Converts one usage event and one pricing schedule into a cost breakdown.
"""

from decimal import Decimal

from usage_billing.schemas.usage import CostResult, ModelPricing, UsageEvent

CENTS_PER_UNIT = Decimal("100")


class CostCalculator:
    """
    Stateless per-event cost calculator.

    Costs are returned in cents as unrounded ``Decimal`` values, so sub-cent
    amounts such as 0.00038 survive. Absent token counts contribute zero.
    """

    def calculate_cost(self, event: UsageEvent, pricing: ModelPricing) -> CostResult:
        """
        Calculate the cost of a usage event.

        Args:
            event: Usage event with optional input/output token counts
            pricing: Per-token prices for the event's model

        Returns:
            Input, output and total cost in cents
        """
        input_cost = self._token_cost(event.input_tokens, pricing.input_token_price)
        output_cost = self._token_cost(event.output_tokens, pricing.output_token_price)

        return CostResult(
            input_cost_cents=input_cost,
            output_cost_cents=output_cost,
            total_cost_cents=input_cost + output_cost,
        )

    @staticmethod
    def _token_cost(tokens: int | None, price: Decimal) -> Decimal:
        if tokens is None:
            return Decimal("0")
        return Decimal(tokens) * price * CENTS_PER_UNIT


_default_calculator = CostCalculator()


def calculate_cost(event: UsageEvent, pricing: ModelPricing) -> CostResult:
    """Calculate cost with the shared calculator instance."""
    return _default_calculator.calculate_cost(event, pricing)
