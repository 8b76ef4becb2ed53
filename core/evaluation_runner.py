"""Sequential evaluation: drive a model through the prompt chain and fingerprint it."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from llm.client import LLMError

from .config import EvaluationConfig
from .errors import EvaluationError, ModelResolutionError
from .evaluation_store import EvaluationStore
from .fingerprint import StepResult, calculate_fingerprint, extract_answer
from .model_resolver import ModelHandle, ModelResolver
from .models import EvaluationStatus
from .prompt_builder import ERROR_SENTINEL, AnswerMap, SequentialPromptBuilder, build_final_sentence
from .prompt_chain import PromptChain, QUANTIZATION_CHAIN

if TYPE_CHECKING:
    from memory.trace_logger import TraceLogger

logger = logging.getLogger(__name__)


@dataclass
class EvaluationSession:
    """Result of a completed evaluation."""

    evaluation_id: str
    fingerprint_id: str
    fingerprint: str
    final_sentence: str
    duration_seconds: int
    total_tests: int
    successful_tests: int
    failed_tests: int
    status: EvaluationStatus
    steps: list[StepResult]


class EvaluationRunner:
    """
    Runs the prompt chain against one model and records the outcome.

    Steps execute strictly in order because each prompt embeds the answers
    to the steps before it. A failed step is recorded as "ERROR" and the
    chain carries on; only resolution and persistence failures end an
    evaluation early, in which case it is marked FAILED and the error is
    re-raised.
    """

    def __init__(
        self,
        resolver: Optional[ModelResolver] = None,
        store: Optional[EvaluationStore] = None,
        chain: PromptChain = QUANTIZATION_CHAIN,
        config: Optional[EvaluationConfig] = None,
        trace_logger: Optional[TraceLogger] = None,
    ):
        self.resolver = resolver or ModelResolver()
        self.store = store or EvaluationStore()
        self.chain = chain
        self.config = config or EvaluationConfig.from_env()
        self.trace_logger = trace_logger

    def run(self, model_id: str, session_id: Optional[str] = None) -> EvaluationSession:
        """
        Run a full evaluation for a model.

        Raises ModelResolutionError subclasses unchanged; any other failure
        is raised as EvaluationError with the cause chained.
        """
        start_time = time.time()
        builder = SequentialPromptBuilder(self.chain)

        evaluation = self.store.create_evaluation(
            model_id=model_id,
            total_tests=builder.total_steps,
            session_id=session_id,
        )
        logger.info("Evaluation %s started for model %s", evaluation.id, model_id)

        try:
            handle = self.resolver.resolve(model_id)
            answers, steps, successful_tests, failed_tests = self._run_chain(handle, builder)

            final_sentence = build_final_sentence(answers, self.chain)
            checksum = calculate_fingerprint(final_sentence)

            duration_seconds = round(time.time() - start_time)
            _, fingerprint = self.store.complete_with_fingerprint(
                evaluation_id=evaluation.id,
                model_id=model_id,
                checksum=checksum,
                final_sentence=final_sentence,
                steps=steps,
                duration_seconds=duration_seconds,
                successful_tests=successful_tests,
                failed_tests=failed_tests,
            )
        except ModelResolutionError as e:
            self._record_failure(evaluation.id, start_time, e)
            raise
        except Exception as e:
            self._record_failure(evaluation.id, start_time, e)
            raise EvaluationError(
                f"Evaluation {evaluation.id} failed: {e}", evaluation_id=evaluation.id
            ) from e

        logger.info(
            "Evaluation %s completed: %d/%d steps succeeded, fingerprint %s",
            evaluation.id, successful_tests, builder.total_steps, checksum,
        )
        self._log_trace(evaluation.id, handle, steps, final_sentence, checksum)

        return EvaluationSession(
            evaluation_id=evaluation.id,
            fingerprint_id=fingerprint.id,
            fingerprint=checksum,
            final_sentence=final_sentence,
            duration_seconds=duration_seconds,
            total_tests=builder.total_steps,
            successful_tests=successful_tests,
            failed_tests=failed_tests,
            status=EvaluationStatus.COMPLETED,
            steps=steps,
        )

    def _run_chain(
        self,
        handle: ModelHandle,
        builder: SequentialPromptBuilder,
    ) -> tuple[AnswerMap, list[StepResult], int, int]:
        answers = AnswerMap()
        steps: list[StepResult] = []
        successful_tests = 0
        failed_tests = 0

        for step in range(1, builder.total_steps + 1):
            prompt = builder.build_prompt(step, answers)
            step_start = time.time()

            try:
                text = handle.generate(
                    builder.system_prompt,
                    prompt,
                    temperature=self.config.temperature,
                    max_output_tokens=self.config.max_output_tokens,
                )
            except LLMError as e:
                response_time_ms = int((time.time() - step_start) * 1000)
                logger.warning("Step %d failed for model %s: %s", step, handle.model_id, e)
                answers.record(step, ERROR_SENTINEL)
                failed_tests += 1
                steps.append(StepResult(step, prompt, str(e), ERROR_SENTINEL, response_time_ms))
                continue

            response_time_ms = int((time.time() - step_start) * 1000)
            answer = extract_answer(text)
            if answer:
                successful_tests += 1
            else:
                answer = ERROR_SENTINEL
                failed_tests += 1
            answers.record(step, answer)
            steps.append(StepResult(step, prompt, text, answer, response_time_ms))

        return answers, steps, successful_tests, failed_tests

    def _record_failure(self, evaluation_id: str, start_time: float, error: Exception) -> None:
        duration_seconds = round(time.time() - start_time)
        logger.error("Evaluation %s failed: %s", evaluation_id, error)
        try:
            self.store.fail_evaluation(
                evaluation_id,
                duration_seconds=duration_seconds,
                error_message=str(error) or type(error).__name__,
            )
        except Exception:
            # The original error is re-raised by the caller
            logger.exception("Could not mark evaluation %s as failed", evaluation_id)

    def _log_trace(
        self,
        evaluation_id: str,
        handle: ModelHandle,
        steps: list[StepResult],
        final_sentence: str,
        checksum: str,
    ) -> None:
        if self.trace_logger is None:
            return
        try:
            self.trace_logger.log_evaluation_trace(
                evaluation_id=evaluation_id,
                model_id=handle.model_id,
                model_name=handle.model_name,
                steps=steps,
                final_sentence=final_sentence,
                checksum=checksum,
            )
        except Exception as e:
            logger.warning("Trace logging failed for evaluation %s: %s", evaluation_id, e)
