"""Provider registry keyed by backend name."""

import logging
from typing import Optional

from ..errors import ConfigurationError
from ..pricing import get_provider
from .base import LLMProvider

logger = logging.getLogger(__name__)

CREDENTIAL_ENV_VARS = {
	"anthropic": "ANTHROPIC_API_KEY",
	"openai": "OPENAI_API_KEY",
}


class ProviderRegistry:
	"""
	Holds the backend providers available to one orchestrator.

	Providers are registered by name ("anthropic", "openai", ...) and
	looked up by model through the pricing table.
	"""

	def __init__(self, providers: Optional[dict[str, LLMProvider]] = None):
		self._providers: dict[str, LLMProvider] = {}
		for name, provider in (providers or {}).items():
			self.register(provider, name=name)

	def register(self, provider: LLMProvider, name: Optional[str] = None) -> None:
		"""Register a provider under its own name or an explicit one."""
		key = name or provider.name
		if key in self._providers:
			logger.debug(f"Replacing provider {key}")
		self._providers[key] = provider

	def get(self, name: str) -> Optional[LLMProvider]:
		return self._providers.get(name)

	def names(self) -> list[str]:
		return list(self._providers)

	def resolve(self, model: str) -> LLMProvider:
		"""
		Return the provider serving a model.

		Raises:
			ConfigurationError: No provider is configured for the model's backend.
		"""
		provider_name = get_provider(model)
		provider = self._providers.get(provider_name)
		if provider is None:
			env_var = CREDENTIAL_ENV_VARS.get(provider_name, f"{provider_name.upper()}_API_KEY")
			raise ConfigurationError(
				f"No {provider_name} provider configured for model {model}. Register one built with {env_var}"
			)
		return provider

	def __contains__(self, name: str) -> bool:
		return name in self._providers

	def __len__(self) -> int:
		return len(self._providers)
