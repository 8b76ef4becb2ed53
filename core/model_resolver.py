"""Model resolution: catalog model id -> callable model handle."""

from dataclasses import dataclass
from typing import Optional

from sqlmodel import select

from llm.client import LLMClient
from llm.registry import ProviderRegistry, UnknownProviderError, default_registry

from .database import get_session
from .errors import ModelInactiveError, ModelNotFoundError, UnsupportedProviderError
from .models import LLMModel, Provider


@dataclass
class ModelHandle:
    """An opaque, ready-to-call model."""

    model_id: str
    model_name: str
    provider_name: str
    client: LLMClient

    def generate(
        self,
        system_prompt: Optional[str],
        prompt: str,
        temperature: float = 0.0,
        max_output_tokens: int = 50,
    ) -> str:
        """Return the completion text. Raises LLMError on provider failure."""
        response = self.client.complete(
            prompt,
            model=self.model_name,
            system_prompt=system_prompt,
            temperature=temperature,
            max_tokens=max_output_tokens,
        )
        return response.text


class ModelResolver:
    """Looks a model up in the catalog and builds a client for its provider."""

    def __init__(self, registry: Optional[ProviderRegistry] = None):
        self.registry = registry or default_registry()

    def resolve(self, model_id: str) -> ModelHandle:
        """
        Resolve a model id.

        Raises ModelNotFoundError, ModelInactiveError or
        UnsupportedProviderError.
        """
        with get_session() as db:
            statement = (
                select(LLMModel, Provider)
                .join(Provider, LLMModel.provider_id == Provider.id)
                .where(LLMModel.id == model_id)
            )
            row = db.exec(statement).first()
            if not row:
                raise ModelNotFoundError(model_id)
            model, provider = row
            if not model.is_active:
                raise ModelInactiveError(model_id)
            model_name = model.name
            provider_name = provider.name
            api_base_url = provider.api_base_url

        try:
            client = self.registry.create_client(provider_name, api_base_url)
        except UnknownProviderError as e:
            raise UnsupportedProviderError(provider_name) from e

        return ModelHandle(
            model_id=model_id,
            model_name=model_name,
            provider_name=provider_name,
            client=client,
        )
