"""Evaluation entry points for the dashboard and scheduled jobs."""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import InvalidRequestError
from .evaluation_runner import EvaluationRunner, EvaluationSession
from .evaluation_store import EvaluationStore
from .models import Evaluation, Fingerprint, PromptResponse


class EvaluationRequest(BaseModel):
    """Validated input for starting an evaluation."""

    model_config = {"str_strip_whitespace": True, "protected_namespaces": ()}

    model_id: str = Field(min_length=1, max_length=128)
    session_id: Optional[str] = Field(default=None, min_length=1, max_length=128)


@dataclass
class EvaluationPage:
    """A page of evaluations, newest first."""

    evaluations: list[Evaluation]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total


@dataclass
class EvaluationDetail:
    """An evaluation with its fingerprint and step responses, if any."""

    evaluation: Evaluation
    fingerprint: Optional[Fingerprint] = None
    responses: list[PromptResponse] = field(default_factory=list)


class EvaluationManager:
    """Validates requests, runs evaluations and answers history queries."""

    def __init__(
        self,
        runner: Optional[EvaluationRunner] = None,
        store: Optional[EvaluationStore] = None,
    ):
        self.store = store or EvaluationStore()
        self.runner = runner or EvaluationRunner(store=self.store)

    def run_evaluation(
        self,
        model_id: str,
        session_id: Optional[str] = None,
    ) -> EvaluationSession:
        """
        Validate the request and run a full evaluation.

        Raises InvalidRequestError before anything is stored if the ids are
        malformed. Resolution and evaluation errors come from the runner.
        """
        try:
            request = EvaluationRequest(model_id=model_id, session_id=session_id)
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid evaluation request: {e}") from e

        return self.runner.run(request.model_id, request.session_id)

    def list_evaluations(
        self,
        model_id: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> EvaluationPage:
        """List evaluations with pagination."""
        return EvaluationPage(
            evaluations=self.store.list_evaluations(model_id, limit=limit, offset=offset),
            total=self.store.count_evaluations(model_id),
            limit=limit,
            offset=offset,
        )

    def get_evaluation_detail(self, evaluation_id: str) -> Optional[EvaluationDetail]:
        """Get an evaluation with its fingerprint and ordered step responses."""
        evaluation = self.store.get_evaluation(evaluation_id)
        if not evaluation:
            return None

        fingerprint = self.store.get_fingerprint_for_evaluation(evaluation_id)
        responses = self.store.get_prompt_responses(fingerprint.id) if fingerprint else []
        return EvaluationDetail(
            evaluation=evaluation,
            fingerprint=fingerprint,
            responses=responses,
        )
