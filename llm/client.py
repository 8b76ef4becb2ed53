"""LLM client using OpenAI SDK for Basma."""

import time
from dataclasses import dataclass
from typing import Optional

from openai import OpenAI

from .config import LLMConfig


@dataclass
class LLMResponse:
    """Response from an LLM completion."""

    text: str
    tokens_used: int
    latency_ms: int
    model: str


class LLMClient:
    """LLM client for any provider exposing an OpenAI-compatible API."""

    def __init__(
        self,
        provider: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_seconds: float = 60.0,
    ):
        """Initialize LLM client with provider configuration."""
        self.provider = provider
        self.api_key = api_key
        self.base_url = base_url

        # Retries belong to the caller; a failed call is reported as-is
        self.client = OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )

    @classmethod
    def from_config(cls, config: LLMConfig) -> "LLMClient":
        """Create client from config object."""
        return cls(
            provider=config.provider,
            api_key=config.api_key,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
        )

    def complete(
        self,
        prompt: str,
        model: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 50,
    ) -> LLMResponse:
        """
        Execute a chat completion request.

        Returns LLMResponse with text, tokens, latency.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        start_time = time.time()

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )

            latency_ms = int((time.time() - start_time) * 1000)

            text = response.choices[0].message.content or ""
            tokens_used = response.usage.total_tokens if response.usage else 0

            return LLMResponse(
                text=text,
                tokens_used=tokens_used,
                latency_ms=latency_ms,
                model=model,
            )

        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            raise LLMError(f"LLM completion failed: {str(e)}", latency_ms=latency_ms) from e


class LLMError(Exception):
    """Exception raised for LLM errors."""

    def __init__(self, message: str, latency_ms: int = 0):
        super().__init__(message)
        self.latency_ms = latency_ms
