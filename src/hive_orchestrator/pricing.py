"""Token cost estimation from a per-model pricing table."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ModelPricing:
	"""Per-model input/output pricing in USD per 1M tokens."""
	input_per_1m: float
	output_per_1m: float
	context_window: int
	provider: str  # anthropic | openai


# Pricing in USD per 1M tokens
MODEL_PRICING: dict[str, ModelPricing] = {
	# Anthropic
	"claude-opus-4-6": ModelPricing(15.0, 75.0, 200_000, "anthropic"),
	"claude-sonnet-4-5-20250929": ModelPricing(3.0, 15.0, 200_000, "anthropic"),
	"claude-haiku-4-5-20251001": ModelPricing(0.8, 4.0, 200_000, "anthropic"),
	# OpenAI
	"gpt-4o": ModelPricing(2.5, 10.0, 128_000, "openai"),
	"gpt-4o-mini": ModelPricing(0.15, 0.6, 128_000, "openai"),
	"o1": ModelPricing(15.0, 60.0, 200_000, "openai"),
	"o3-mini": ModelPricing(1.1, 4.4, 200_000, "openai"),
}

# Unknown models are priced high so budgets err on the safe side.
FALLBACK_PRICING = ModelPricing(10.0, 30.0, 128_000, "anthropic")

DEFAULT_PROVIDER = "anthropic"


def get_pricing(model: str) -> ModelPricing:
	"""Return the pricing for a model, or the fallback for unknown models."""
	return MODEL_PRICING.get(model, FALLBACK_PRICING)


def calculate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
	"""Cost in USD of one call with the given token counts."""
	pricing = get_pricing(model)
	return (
		(input_tokens / 1_000_000) * pricing.input_per_1m
		+ (output_tokens / 1_000_000) * pricing.output_per_1m
	)


def get_provider(model: str) -> str:
	"""Name of the provider that serves a model."""
	pricing = MODEL_PRICING.get(model)
	return pricing.provider if pricing else DEFAULT_PROVIDER


def suggest_model(provider: str, estimated_tokens: int, max_cost: float) -> Optional[str]:
	"""
	Pick the cheapest model from a provider that fits within a budget.

	The estimate prices estimated_tokens as both input and output.
	"""
	candidates = []
	for model, pricing in MODEL_PRICING.items():
		if pricing.provider != provider:
			continue
		estimated_cost = calculate_cost(model, estimated_tokens, estimated_tokens)
		if estimated_cost <= max_cost:
			candidates.append((estimated_cost, model))

	if not candidates:
		return None
	return min(candidates)[1]
