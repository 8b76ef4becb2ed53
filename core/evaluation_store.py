"""Durable storage of evaluations, fingerprints and step responses."""

from datetime import datetime
from typing import Optional

from sqlmodel import func, select

from .database import get_session
from .errors import EvaluationStateError
from .fingerprint import StepResult
from .models import Evaluation, EvaluationStatus, Fingerprint, PromptResponse, utc_now


class EvaluationStore:
    """
    Append-only persistence for the evaluation lifecycle.

    An evaluation is created RUNNING and receives exactly one terminal
    update (COMPLETED or FAILED). Fingerprints and their prompt responses
    are written once and never edited.
    """

    def create_evaluation(
        self,
        model_id: str,
        total_tests: int,
        session_id: Optional[str] = None,
    ) -> Evaluation:
        """Create a RUNNING evaluation with zeroed counts."""
        evaluation = Evaluation(
            model_id=model_id,
            session_id=session_id,
            status=EvaluationStatus.RUNNING,
            total_tests=total_tests,
            successful_tests=0,
            failed_tests=0,
            started_at=utc_now(),
        )
        with get_session() as db:
            db.add(evaluation)
            db.commit()
            db.refresh(evaluation)
            db.expunge(evaluation)
        return evaluation

    def complete_evaluation(
        self,
        evaluation_id: str,
        duration_seconds: int,
        successful_tests: int,
        failed_tests: int,
    ) -> Evaluation:
        """Move a RUNNING evaluation to COMPLETED."""
        return self._finish(
            evaluation_id,
            status=EvaluationStatus.COMPLETED,
            duration_seconds=duration_seconds,
            successful_tests=successful_tests,
            failed_tests=failed_tests,
        )

    def fail_evaluation(
        self,
        evaluation_id: str,
        duration_seconds: int,
        error_message: str,
    ) -> Evaluation:
        """Move a RUNNING evaluation to FAILED, keeping the counts at zero."""
        return self._finish(
            evaluation_id,
            status=EvaluationStatus.FAILED,
            duration_seconds=duration_seconds,
            error_message=error_message,
        )

    def complete_with_fingerprint(
        self,
        evaluation_id: str,
        model_id: str,
        checksum: str,
        final_sentence: str,
        steps: list[StepResult],
        duration_seconds: int,
        successful_tests: int,
        failed_tests: int,
    ) -> tuple[Evaluation, Fingerprint]:
        """
        Store the fingerprint with its step responses and complete the
        evaluation in one transaction.

        Nothing is written unless the evaluation ends up COMPLETED.
        """
        fingerprint, responses = self._build_fingerprint(
            evaluation_id, model_id, checksum, final_sentence, steps
        )
        with get_session() as db:
            evaluation = self._get_running(db, evaluation_id)
            db.add(fingerprint)
            db.add_all(responses)
            db.flush()

            self._apply_finish(
                evaluation,
                EvaluationStatus.COMPLETED,
                duration_seconds=duration_seconds,
                successful_tests=successful_tests,
                failed_tests=failed_tests,
            )
            db.add(evaluation)
            db.commit()
            db.refresh(evaluation)
            db.refresh(fingerprint)
            db.expunge(evaluation)
            db.expunge(fingerprint)
        return evaluation, fingerprint

    def _get_running(self, db, evaluation_id: str) -> Evaluation:
        statement = select(Evaluation).where(Evaluation.id == evaluation_id)
        evaluation = db.exec(statement).first()
        if not evaluation:
            raise EvaluationStateError(f"Evaluation {evaluation_id} not found")
        if evaluation.status != EvaluationStatus.RUNNING:
            raise EvaluationStateError(
                f"Evaluation {evaluation_id} is already {evaluation.status.value}"
            )
        return evaluation

    def _apply_finish(self, evaluation: Evaluation, status: EvaluationStatus, **fields) -> None:
        evaluation.status = status
        evaluation.completed_at = utc_now()
        for key, value in fields.items():
            setattr(evaluation, key, value)

    def _finish(self, evaluation_id: str, status: EvaluationStatus, **fields) -> Evaluation:
        with get_session() as db:
            evaluation = self._get_running(db, evaluation_id)
            self._apply_finish(evaluation, status, **fields)
            db.add(evaluation)
            db.commit()
            db.refresh(evaluation)
            db.expunge(evaluation)
            return evaluation

    def create_fingerprint(
        self,
        evaluation_id: str,
        model_id: str,
        checksum: str,
        final_sentence: str,
        steps: list[StepResult],
    ) -> Fingerprint:
        """Store a fingerprint and its step responses in one transaction."""
        fingerprint, responses = self._build_fingerprint(
            evaluation_id, model_id, checksum, final_sentence, steps
        )
        with get_session() as db:
            db.add(fingerprint)
            db.add_all(responses)
            db.commit()
            db.refresh(fingerprint)
            db.expunge(fingerprint)
        return fingerprint

    def _build_fingerprint(
        self,
        evaluation_id: str,
        model_id: str,
        checksum: str,
        final_sentence: str,
        steps: list[StepResult],
    ) -> tuple[Fingerprint, list[PromptResponse]]:
        fingerprint = Fingerprint(
            checksum=checksum,
            final_sentence=final_sentence,
            model_id=model_id,
            evaluation_id=evaluation_id,
        )
        responses = [
            PromptResponse(
                fingerprint_id=fingerprint.id,
                step_number=step.step_number,
                prompt=step.prompt,
                raw_response=step.raw_response,
                extracted_answer=step.extracted_answer,
                response_time_ms=step.response_time_ms,
            )
            for step in steps
        ]
        return fingerprint, responses

    def get_evaluation(self, evaluation_id: str) -> Optional[Evaluation]:
        with get_session() as db:
            statement = select(Evaluation).where(Evaluation.id == evaluation_id)
            result = db.exec(statement).first()
            if result:
                db.expunge(result)
            return result

    def list_evaluations(
        self,
        model_id: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Evaluation]:
        """List evaluations newest first, optionally for one model."""
        with get_session() as db:
            statement = select(Evaluation).order_by(Evaluation.created_at.desc())
            if model_id:
                statement = statement.where(Evaluation.model_id == model_id)
            statement = statement.offset(offset).limit(limit)
            results = db.exec(statement).all()
            for r in results:
                db.expunge(r)
            return list(results)

    def count_evaluations(self, model_id: Optional[str] = None) -> int:
        with get_session() as db:
            statement = select(func.count()).select_from(Evaluation)
            if model_id:
                statement = statement.where(Evaluation.model_id == model_id)
            return db.exec(statement).one()

    def get_fingerprint_for_evaluation(self, evaluation_id: str) -> Optional[Fingerprint]:
        with get_session() as db:
            statement = select(Fingerprint).where(Fingerprint.evaluation_id == evaluation_id)
            result = db.exec(statement).first()
            if result:
                db.expunge(result)
            return result

    def get_prompt_responses(self, fingerprint_id: str) -> list[PromptResponse]:
        """Get the step responses of a fingerprint, ordered by step."""
        with get_session() as db:
            statement = (
                select(PromptResponse)
                .where(PromptResponse.fingerprint_id == fingerprint_id)
                .order_by(PromptResponse.step_number)
            )
            results = db.exec(statement).all()
            for r in results:
                db.expunge(r)
            return list(results)

    def list_fingerprints(
        self,
        model_id: Optional[str] = None,
        since: Optional[datetime] = None,
    ) -> list[Fingerprint]:
        """List fingerprints oldest first, optionally filtered by model and time."""
        with get_session() as db:
            statement = select(Fingerprint).order_by(Fingerprint.timestamp)
            if model_id:
                statement = statement.where(Fingerprint.model_id == model_id)
            if since:
                statement = statement.where(Fingerprint.timestamp >= since)
            results = db.exec(statement).all()
            for r in results:
                db.expunge(r)
            return list(results)
