"""SQLModel entity definitions for Basma."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class EvaluationStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Provider(SQLModel, table=True):
    """An LLM provider; name is the provider registry key."""

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(index=True, unique=True)
    display_name: str
    api_base_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class LLMModel(SQLModel, table=True):
    """A model offered by a provider that can be fingerprinted."""

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    provider_id: str = Field(foreign_key="provider.id", index=True)
    name: str  # Name sent to the provider API
    display_name: str
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utc_now)


class Evaluation(SQLModel, table=True):
    """One run of the prompt chain against a model."""

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    model_id: str = Field(foreign_key="llmmodel.id", index=True)
    session_id: Optional[str] = Field(default=None, index=True)
    status: EvaluationStatus = Field(default=EvaluationStatus.RUNNING, index=True)
    total_tests: int
    successful_tests: int = 0
    failed_tests: int = 0
    started_at: datetime = Field(default_factory=utc_now)
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    error_message: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class Fingerprint(SQLModel, table=True):
    """Checksum of the final sentence produced by a completed evaluation."""

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    checksum: str = Field(index=True)
    final_sentence: str
    model_id: str = Field(foreign_key="llmmodel.id", index=True)
    evaluation_id: str = Field(foreign_key="evaluation.id", index=True, unique=True)
    timestamp: datetime = Field(default_factory=utc_now, index=True)


class PromptResponse(SQLModel, table=True):
    """A single chain step: the rendered prompt and what the model said."""

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    fingerprint_id: str = Field(foreign_key="fingerprint.id", index=True)
    step_number: int
    prompt: str
    raw_response: str
    extracted_answer: str
    response_time_ms: int
