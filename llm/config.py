"""LLM configuration for Basma."""

import os
from dataclasses import dataclass
from typing import Optional

# Provider name -> (API key env var, OpenAI-compatible base URL)
PROVIDER_ENDPOINTS: dict[str, tuple[str, Optional[str]]] = {
    "openai": ("OPENAI_API_KEY", None),
    "anthropic": ("ANTHROPIC_API_KEY", "https://api.anthropic.com/v1/"),
    "google": ("GOOGLE_API_KEY", "https://generativelanguage.googleapis.com/v1beta/openai/"),
    "mistral": ("MISTRAL_API_KEY", "https://api.mistral.ai/v1"),
    "xai": ("XAI_API_KEY", "https://api.x.ai/v1"),
    "openrouter": ("OPENROUTER_API_KEY", "https://openrouter.ai/api/v1"),
}

DEFAULT_TIMEOUT_SECONDS = 60.0


@dataclass
class LLMConfig:
    """Configuration for a single provider's LLM client."""

    provider: str
    api_key: str
    base_url: Optional[str] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls, provider: str, base_url: Optional[str] = None) -> "LLMConfig":
        """
        Create config for a provider from environment variables.

        An explicit base_url (e.g. from the model catalog) wins over the
        provider's default endpoint.
        """
        provider = provider.lower()
        key_var, default_base_url = PROVIDER_ENDPOINTS.get(
            provider, (f"{provider.upper().replace('-', '_')}_API_KEY", None)
        )
        api_key = os.getenv(key_var, "")
        timeout_seconds = float(
            os.getenv("LLM_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        )

        return cls(
            provider=provider,
            api_key=api_key,
            base_url=base_url or default_base_url,
            timeout_seconds=timeout_seconds,
        )
