# LLM client layer
from .client import LLMClient, LLMResponse, LLMError
from .config import LLMConfig
from .registry import ProviderRegistry, UnknownProviderError, default_registry

__all__ = [
    "LLMClient",
    "LLMResponse",
    "LLMError",
    "LLMConfig",
    "ProviderRegistry",
    "UnknownProviderError",
    "default_registry",
]
