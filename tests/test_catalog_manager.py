"""Tests for the provider/model catalog and model resolution."""

from __future__ import annotations

import pytest

from core.errors import ModelInactiveError, ModelNotFoundError, UnsupportedProviderError
from core.model_resolver import ModelResolver
from llm.registry import ProviderRegistry

from tests.conftest import FakeLLMClient


class TestCatalogManager:
    def test_provider_names_normalized(self, catalog):
        provider = catalog.upsert_provider("  OpenAI ", "OpenAI")
        assert provider.name == "openai"
        assert catalog.get_provider("OPENAI").id == provider.id

    def test_upsert_provider_updates_existing(self, catalog):
        first = catalog.upsert_provider("xai", "xAI")
        second = catalog.upsert_provider("xai", "xAI Grok", api_base_url="http://proxy/v1")
        assert first.id == second.id
        assert second.display_name == "xAI Grok"
        assert len(catalog.list_providers()) == 1

    def test_upsert_provider_keeps_base_url_when_omitted(self, catalog):
        catalog.upsert_provider("local", api_base_url="http://localhost:4000/v1")

        provider = catalog.upsert_provider("local", "Local Proxy")

        assert provider.api_base_url == "http://localhost:4000/v1"
        assert provider.display_name == "Local Proxy"

    def test_upsert_model_requires_provider(self, catalog):
        with pytest.raises(ValueError, match="not found"):
            catalog.upsert_model("nobody", "model-x")

    def test_upsert_model_updates_existing(self, catalog, model_id):
        again = catalog.upsert_model("fake", "fake-model-1", "Renamed", is_active=False)
        assert again.id == model_id
        assert again.display_name == "Renamed"
        assert again.is_active is False

    def test_get_model_with_provider(self, catalog, model_id):
        model, provider = catalog.get_model(model_id)
        assert model.name == "fake-model-1"
        assert provider.name == "fake"
        assert catalog.get_model("nope") is None

    def test_list_models_active_only(self, catalog, model_id):
        catalog.upsert_model("fake", "fake-model-2", is_active=False)

        assert len(catalog.list_models()) == 2
        active = catalog.list_models(active_only=True)
        assert [m.id for m, _ in active] == [model_id]

    def test_set_model_active(self, catalog, model_id):
        assert catalog.set_model_active(model_id, False).is_active is False
        assert catalog.set_model_active(model_id, True).is_active is True
        assert catalog.set_model_active("nope", True) is None


class TestModelResolver:
    def _registry(self, client) -> ProviderRegistry:
        registry = ProviderRegistry()
        registry.register("fake", lambda provider, api_base_url: client)
        return registry

    def test_resolve_builds_handle(self, model_id):
        client = FakeLLMClient(['{"answer": "ok"}'])
        handle = ModelResolver(self._registry(client)).resolve(model_id)

        assert handle.model_id == model_id
        assert handle.model_name == "fake-model-1"
        assert handle.provider_name == "fake"
        assert handle.generate("system", "prompt", temperature=0.0, max_output_tokens=5) == '{"answer": "ok"}'
        assert client.calls[0]["max_tokens"] == 5
        assert client.calls[0]["system_prompt"] == "system"

    def test_provider_base_url_passed_to_factory(self, catalog):
        catalog.upsert_provider("fake", api_base_url="http://localhost:4000/v1")
        model = catalog.upsert_model("fake", "local")
        seen = {}

        def factory(provider, api_base_url):
            seen["url"] = api_base_url
            return FakeLLMClient([])

        registry = ProviderRegistry()
        registry.register("fake", factory)
        ModelResolver(registry).resolve(model.id)

        assert seen["url"] == "http://localhost:4000/v1"

    def test_not_found(self):
        with pytest.raises(ModelNotFoundError, match="Model not found: ghost"):
            ModelResolver(ProviderRegistry()).resolve("ghost")

    def test_inactive(self, catalog, model_id):
        catalog.set_model_active(model_id, False)
        with pytest.raises(ModelInactiveError, match="Model is not active"):
            ModelResolver(self._registry(FakeLLMClient([]))).resolve(model_id)

    def test_unsupported_provider(self, model_id):
        with pytest.raises(UnsupportedProviderError, match="Unsupported provider: fake"):
            ModelResolver(ProviderRegistry()).resolve(model_id)
