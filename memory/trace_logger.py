"""MLflow trace logging for Basma evaluations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import mlflow

if TYPE_CHECKING:
    from core.fingerprint import StepResult


class TraceLogger:
    """
    Logs evaluation runs to MLflow.

    Each evaluation becomes one trace whose root span holds the final
    sentence and checksum, with a child span per chain step.
    """

    def __init__(self, experiment_id: str):
        self.experiment_id = experiment_id
        mlflow.set_experiment(experiment_id=experiment_id)

    def log_evaluation_trace(
        self,
        evaluation_id: str,
        model_id: str,
        model_name: str,
        steps: list[StepResult],
        final_sentence: str,
        checksum: str,
    ) -> str:
        """
        Create an MLflow trace for a completed evaluation.

        Returns the trace_id.
        """
        with mlflow.start_span(
            name="fingerprint_eval",
            attributes={
                "evaluation_id": evaluation_id,
                "model_id": model_id,
                "model": model_name,
            },
        ) as root:
            root.set_inputs({"model": model_name, "steps": len(steps)})

            for step in steps:
                with mlflow.start_span(
                    name=f"step_{step.step_number}",
                    attributes={"response_time_ms": step.response_time_ms},
                ) as span:
                    span.set_inputs({"prompt": step.prompt})
                    span.set_outputs(
                        {
                            "raw_response": step.raw_response,
                            "answer": step.extracted_answer,
                        }
                    )

            root.set_outputs(
                {
                    "final_sentence": final_sentence,
                    "checksum": checksum,
                }
            )
            trace_id = root.trace_id

        return trace_id
