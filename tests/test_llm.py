"""Tests for the LLM client, its config and the provider registry."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from llm.client import LLMClient, LLMError
from llm.config import LLMConfig
from llm.registry import ProviderRegistry, UnknownProviderError, default_registry


def _completion(text: str, total_tokens: int = 7):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=SimpleNamespace(total_tokens=total_tokens),
    )


class TestLLMConfig:
    def test_known_provider(self, monkeypatch):
        monkeypatch.setenv("XAI_API_KEY", "xai-key")
        monkeypatch.delenv("LLM_TIMEOUT_SECONDS", raising=False)

        config = LLMConfig.from_env("XAI")

        assert config.provider == "xai"
        assert config.api_key == "xai-key"
        assert config.base_url == "https://api.x.ai/v1"
        assert config.timeout_seconds == 60.0

    def test_openai_uses_sdk_default_url(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert LLMConfig.from_env("openai").base_url is None

    def test_explicit_base_url_wins(self, monkeypatch):
        monkeypatch.setenv("MISTRAL_API_KEY", "m")
        config = LLMConfig.from_env("mistral", base_url="http://proxy/v1")
        assert config.base_url == "http://proxy/v1"

    def test_unknown_provider_key_variable(self, monkeypatch):
        monkeypatch.setenv("MY_LAB_API_KEY", "lab")
        monkeypatch.setenv("LLM_TIMEOUT_SECONDS", "5")
        config = LLMConfig.from_env("my-lab")
        assert config.api_key == "lab"
        assert config.base_url is None
        assert config.timeout_seconds == 5.0


class TestLLMClient:
    def _client(self) -> LLMClient:
        client = LLMClient(provider="openai", api_key="sk-test")
        client.client = MagicMock()
        return client

    def test_complete_sends_system_and_user_messages(self):
        client = self._client()
        client.client.chat.completions.create.return_value = _completion('{"answer": "bad"}')

        response = client.complete("The meeting was", model="gpt-4o-mini", system_prompt="One word.")

        assert response.text == '{"answer": "bad"}'
        assert response.tokens_used == 7
        assert response.model == "gpt-4o-mini"
        kwargs = client.client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "One word."},
            {"role": "user", "content": "The meeting was"},
        ]
        assert kwargs["temperature"] == 0.0
        assert kwargs["max_tokens"] == 50

    def test_complete_without_system_prompt(self):
        client = self._client()
        client.client.chat.completions.create.return_value = _completion("x")

        client.complete("hi", model="m")

        kwargs = client.client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]

    def test_empty_content_becomes_empty_text(self):
        client = self._client()
        client.client.chat.completions.create.return_value = _completion(None)
        assert client.complete("hi", model="m").text == ""

    def test_provider_errors_wrapped(self):
        client = self._client()
        client.client.chat.completions.create.side_effect = ConnectionError("reset by peer")

        with pytest.raises(LLMError, match="LLM completion failed: reset by peer") as exc_info:
            client.complete("hi", model="m")

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert exc_info.value.latency_ms >= 0

    def test_sdk_client_does_not_retry(self):
        client = LLMClient(provider="openai", api_key="sk-test", timeout_seconds=12)
        assert client.client.max_retries == 0


class TestProviderRegistry:
    def test_register_and_create(self):
        sentinel = object()
        registry = ProviderRegistry()
        registry.register("Local", lambda provider, url: sentinel, aliases=("lab",))

        assert registry.create_client("local") is sentinel
        assert registry.create_client("LAB") is sentinel
        assert registry.supports("local")
        assert registry.providers() == ["lab", "local"]

    def test_unknown_provider(self):
        with pytest.raises(UnknownProviderError, match="Unsupported provider: nope"):
            ProviderRegistry().create_client("nope")

    def test_factory_receives_base_url(self):
        seen = []
        registry = ProviderRegistry()
        registry.register("p", lambda provider, url: seen.append((provider, url)))

        registry.create_client("P", "http://x")

        assert seen == [("p", "http://x")]

    def test_default_registry_providers(self):
        assert default_registry().providers() == [
            "anthropic", "google", "google-vertex", "mistral", "openai", "openrouter", "xai",
        ]

    def test_default_registry_builds_openai_compatible_clients(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "ant")
        monkeypatch.setenv("GOOGLE_API_KEY", "goo")
        registry = default_registry()

        anthropic = registry.create_client("anthropic")
        assert isinstance(anthropic, LLMClient)
        assert anthropic.api_key == "ant"
        assert anthropic.base_url == "https://api.anthropic.com/v1/"

        vertex = registry.create_client("google-vertex")
        assert vertex.provider == "google"
        assert vertex.api_key == "goo"
