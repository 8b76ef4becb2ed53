"""Provider registry mapping provider names to LLM client factories."""

from typing import Callable, Optional

from .client import LLMClient
from .config import LLMConfig

# factory(provider, api_base_url) -> client
ClientFactory = Callable[[str, Optional[str]], LLMClient]


class UnknownProviderError(LookupError):
    """Raised when no client factory is registered for a provider."""


def openai_compatible_factory(provider: str, api_base_url: Optional[str] = None) -> LLMClient:
    """Build an OpenAI SDK client for the provider from environment config."""
    return LLMClient.from_config(LLMConfig.from_env(provider, base_url=api_base_url))


class ProviderRegistry:
    """
    Strategy table of provider name -> client factory.

    New providers are added with register(); the evaluation runner never
    needs to know which providers exist.
    """

    def __init__(self):
        self._factories: dict[str, ClientFactory] = {}

    def register(
        self,
        name: str,
        factory: ClientFactory,
        aliases: tuple[str, ...] = (),
    ) -> None:
        """Register a factory under a provider name and optional aliases."""
        for key in (name, *aliases):
            self._factories[key.lower()] = factory

    def supports(self, provider: str) -> bool:
        return provider.lower() in self._factories

    def providers(self) -> list[str]:
        """List registered provider names (aliases included)."""
        return sorted(self._factories)

    def create_client(
        self,
        provider: str,
        api_base_url: Optional[str] = None,
    ) -> LLMClient:
        """Create a client for the provider. Raises UnknownProviderError."""
        factory = self._factories.get(provider.lower())
        if factory is None:
            raise UnknownProviderError(f"Unsupported provider: {provider}")
        return factory(provider.lower(), api_base_url)


def default_registry() -> ProviderRegistry:
    """Registry with every provider Basma knows out of the box."""
    registry = ProviderRegistry()
    for provider in ("openai", "anthropic", "mistral", "xai", "openrouter"):
        registry.register(provider, openai_compatible_factory)
    registry.register("google", _gemini_factory, aliases=("google-vertex",))
    return registry


def _gemini_factory(provider: str, api_base_url: Optional[str] = None) -> LLMClient:
    # google-vertex shares the Gemini endpoint and key
    return openai_compatible_factory("google", api_base_url)
