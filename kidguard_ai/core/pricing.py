"""
Pricing calculations for chat-completion calls.

Prompt and completion tokens are billed at distinct per-token rates.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_UP
from typing import Dict

MILLION = Decimal("1000000")
COST_QUANTUM = Decimal("0.000001")


@dataclass(frozen=True)
class TokenUsage:
    """Token counts reported by the provider for one completion."""
    prompt_tokens: int
    completion_tokens: int

    def __post_init__(self):
        """Validate counts are non-negative."""
        if self.prompt_tokens < 0:
            raise ValueError("prompt_tokens cannot be negative")
        if self.completion_tokens < 0:
            raise ValueError("completion_tokens cannot be negative")

    @property
    def total_tokens(self) -> int:
        """Total tokens used (prompt + completion)."""
        return self.prompt_tokens + self.completion_tokens


@dataclass(frozen=True)
class ModelPricing:
    """Per-million-token pricing for a specific model."""
    prompt_cost_per_1m: Decimal
    completion_cost_per_1m: Decimal

    @property
    def price_per_prompt_token(self) -> Decimal:
        return self.prompt_cost_per_1m / MILLION

    @property
    def price_per_completion_token(self) -> Decimal:
        return self.completion_cost_per_1m / MILLION


@dataclass(frozen=True)
class PricingTable:
    """Fixed pricing table for supported models."""
    prices: Dict[str, ModelPricing]

    def get_pricing(self, model: str) -> ModelPricing:
        """Get pricing for a specific model.

        Raises:
            ValueError: If model is not supported
        """
        if model not in self.prices:
            raise ValueError(f"Unsupported model: {model}")
        return self.prices[model]

    def supports(self, model: str) -> bool:
        return model in self.prices


@dataclass(frozen=True)
class CostCalculation:
    """Breakdown of the cost of one call."""
    prompt_tokens: int
    completion_tokens: int
    total_cost: float
    price_per_prompt_token: float
    price_per_completion_token: float


# Provider list prices in USD (cache-miss input rate)
PRICING_TABLE = PricingTable({
    "deepseek-chat": ModelPricing(
        prompt_cost_per_1m=Decimal("0.27"),
        completion_cost_per_1m=Decimal("1.10")
    ),
    "deepseek-reasoner": ModelPricing(
        prompt_cost_per_1m=Decimal("0.55"),
        completion_cost_per_1m=Decimal("2.19")
    ),
})


def calculate_cost(model: str, usage: TokenUsage) -> CostCalculation:
    """Calculate the cost of one call with conservative rounding.

    Args:
        model: Model identifier
        usage: Token usage data

    Returns:
        CostCalculation with the total rounded UP to 6 decimal places

    Raises:
        ValueError: If model is not supported
    """
    pricing = PRICING_TABLE.get_pricing(model)

    prompt_cost = Decimal(usage.prompt_tokens) * pricing.price_per_prompt_token
    completion_cost = Decimal(usage.completion_tokens) * pricing.price_per_completion_token

    # Conservative rounding (always round UP)
    total_cost = (prompt_cost + completion_cost).quantize(COST_QUANTUM, rounding=ROUND_UP)

    return CostCalculation(
        prompt_tokens=usage.prompt_tokens,
        completion_tokens=usage.completion_tokens,
        total_cost=float(total_cost),
        price_per_prompt_token=float(pricing.price_per_prompt_token),
        price_per_completion_token=float(pricing.price_per_completion_token),
    )
