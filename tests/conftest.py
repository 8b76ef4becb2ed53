"""Shared test fixtures for Basma."""

from __future__ import annotations

from typing import Optional, Union

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from core import database as db_module
from core.catalog_manager import CatalogManager
from core.evaluation_runner import EvaluationRunner
from core.evaluation_store import EvaluationStore
from core.model_resolver import ModelResolver
from llm.client import LLMResponse
from llm.registry import ProviderRegistry

EXAMPLE_ANSWERS = [
    "bad", "nervous", "careful", "5", "March",
    "tight", "late", "stressful", "anxious", "uncertain",
]

EXAMPLE_SENTENCE = (
    "The meeting was extremely bad. The manager felt increasingly nervous, "
    "so she decided to be more careful and include exactly 5 team members. "
    "The project would launch in March with a budget that was tight. "
    "Payments would arrive late, making the plan seem stressful. "
    "Everyone became remarkably anxious, and the outcome was ultimately uncertain"
)


def json_answer(word: str) -> str:
    return f'{{"answer": "{word}"}}'


class FakeLLMClient:
    """Scripted stand-in for LLMClient: returns or raises one item per call."""

    def __init__(self, script: list[Union[str, Exception]]):
        self.script = list(script)
        self.calls: list[dict] = []

    def complete(
        self,
        prompt: str,
        model: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 50,
    ) -> LLMResponse:
        self.calls.append(
            {
                "prompt": prompt,
                "model": model,
                "system_prompt": system_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        item = self.script[len(self.calls) - 1]
        if isinstance(item, Exception):
            raise item
        return LLMResponse(text=item, tokens_used=0, latency_ms=0, model=model)


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def engine(monkeypatch):
    """In-memory SQLite database shared by every session in a test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    monkeypatch.setattr(db_module, "_engine", test_engine)
    db_module.init_db()
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def catalog() -> CatalogManager:
    return CatalogManager()


@pytest.fixture
def store() -> EvaluationStore:
    return EvaluationStore()


@pytest.fixture
def model_id(catalog) -> str:
    """An active model served by the 'fake' provider."""
    catalog.upsert_provider("fake", "Fake Provider")
    return catalog.upsert_model("fake", "fake-model-1", "Fake Model").id


# ---------------------------------------------------------------------------
# Runner fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_runner(store):
    """Build a runner whose 'fake' provider answers from a script."""

    def _make(script: list[Union[str, Exception]], **kwargs) -> tuple[EvaluationRunner, FakeLLMClient]:
        client = FakeLLMClient(script)
        registry = ProviderRegistry()
        registry.register("fake", lambda provider, api_base_url: client)
        runner = EvaluationRunner(
            resolver=ModelResolver(registry),
            store=kwargs.pop("store", store),
            **kwargs,
        )
        return runner, client

    return _make
