"""
Cost Aggregation
================
Roll priced usage events up into per-user billing summaries.
"""

from collections.abc import Iterable
from decimal import Decimal

from usage_billing.core.periods import BillingPeriod
from usage_billing.schemas.usage import BillingSummary, CostResult, UsageEvent


def aggregate_costs(
    period: BillingPeriod,
    priced_events: Iterable[tuple[UsageEvent, CostResult]],
) -> list[BillingSummary]:
    """
    Group priced events that fall inside a period by user.

    Events outside the period's time range are ignored. Absent token counts
    add nothing to the token totals.

    Returns:
        One summary per user, ordered by user id
    """
    start, end = period.get_time_range()
    totals: dict[str, dict] = {}

    for event, cost in priced_events:
        if not period.contains(event.timestamp):
            continue

        row = totals.setdefault(event.user_id, {
            "total_requests": 0,
            "total_input_tokens": 0,
            "total_output_tokens": 0,
            "input_cost_cents": Decimal("0"),
            "output_cost_cents": Decimal("0"),
        })
        row["total_requests"] += 1
        row["total_input_tokens"] += event.input_tokens or 0
        row["total_output_tokens"] += event.output_tokens or 0
        row["input_cost_cents"] += cost.input_cost_cents
        row["output_cost_cents"] += cost.output_cost_cents

    return [
        BillingSummary(
            user_id=user_id,
            period_key=period.to_key(),
            period_start=start,
            period_end=end,
            total_cost_cents=row["input_cost_cents"] + row["output_cost_cents"],
            **row,
        )
        for user_id, row in sorted(totals.items())
    ]
