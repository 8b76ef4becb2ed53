"""Evaluation settings for Basma."""

import os
from dataclasses import dataclass

DEFAULT_MAX_OUTPUT_TOKENS = 50


@dataclass(frozen=True)
class EvaluationConfig:
    """Sampling settings applied to every chain step."""

    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    # Pinned so that completions are as deterministic as the provider allows
    temperature: float = 0.0

    @classmethod
    def from_env(cls) -> "EvaluationConfig":
        """Create config from environment variables."""
        max_output_tokens = int(
            os.getenv("EVAL_MAX_OUTPUT_TOKENS", str(DEFAULT_MAX_OUTPUT_TOKENS))
        )
        return cls(max_output_tokens=max_output_tokens)
