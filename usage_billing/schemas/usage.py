"""
Usage Schemas
=============
Pydantic models for usage events, pricing and computed costs.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _to_decimal(v: Any) -> Any:
    # Floats go through str() so 1e-07 becomes Decimal("1E-7") rather than
    # its binary expansion.
    if isinstance(v, float):
        return Decimal(str(v))
    return v


class UsageEvent(BaseModel):
    """
    A single metered LLM interaction.

    Token counts are optional: ``None`` means no tokens of that kind were
    recorded, which is not the same as zero.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: UUID = Field(default_factory=uuid4)
    user_id: str = Field(default="", max_length=255)
    model_id: str = Field(default="", max_length=255)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    input_tokens: int | None = Field(default=None, ge=0)
    output_tokens: int | None = Field(default=None, ge=0)
    cached_tokens: int | None = Field(default=None, ge=0)
    reasoning_tokens: int | None = Field(default=None, ge=0)

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> datetime:
        if isinstance(v, str):
            v = datetime.fromisoformat(v.replace("Z", "+00:00"))
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class ModelPricing(BaseModel):
    """Per-token prices for one model, in currency major units."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_id: str | None = None
    input_token_price: Decimal = Field(default=Decimal("0"), ge=0)
    output_token_price: Decimal = Field(default=Decimal("0"), ge=0)

    @field_validator("input_token_price", "output_token_price", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> Any:
        return _to_decimal(v)


class CostResult(BaseModel):
    """Cost of one usage event in fractional cents."""

    model_config = ConfigDict(frozen=True)

    input_cost_cents: Decimal = Decimal("0")
    output_cost_cents: Decimal = Decimal("0")
    total_cost_cents: Decimal = Decimal("0")

    @model_validator(mode="after")
    def check_total(self) -> "CostResult":
        if self.total_cost_cents != self.input_cost_cents + self.output_cost_cents:
            raise ValueError("total_cost_cents must equal input_cost_cents + output_cost_cents")
        return self


class BillingSummary(BaseModel):
    """Rolled-up usage and cost for one user over one billing period."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    period_key: str
    period_start: datetime
    period_end: datetime
    total_requests: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    input_cost_cents: Decimal = Decimal("0")
    output_cost_cents: Decimal = Decimal("0")
    total_cost_cents: Decimal = Decimal("0")

    @model_validator(mode="after")
    def check_total(self) -> "BillingSummary":
        if self.total_cost_cents != self.input_cost_cents + self.output_cost_cents:
            raise ValueError("total_cost_cents must equal input_cost_cents + output_cost_cents")
        return self
