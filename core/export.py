"""Export functionality for Basma."""

import json

from .evaluation_manager import EvaluationDetail


def export_fingerprint_markdown(detail: EvaluationDetail) -> str:
    """Export an evaluation's fingerprint and step answers as Markdown."""
    evaluation = detail.evaluation
    fingerprint = detail.fingerprint

    lines = [
        f"# Evaluation {evaluation.id}",
        "",
        f"- Model: {evaluation.model_id}",
        f"- Status: {evaluation.status.value}",
        f"- Steps: {evaluation.successful_tests}/{evaluation.total_tests} succeeded",
        f"- Started: {evaluation.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
    ]
    if evaluation.error_message:
        lines.append(f"- Error: {evaluation.error_message}")

    if fingerprint:
        lines += [
            "",
            "## Fingerprint",
            "",
            f"`{fingerprint.checksum}`",
            "",
            f"> {fingerprint.final_sentence}",
            "",
            "## Steps",
            "",
            "| Step | Answer | Time (ms) |",
            "|------|--------|-----------|",
        ]
        for response in detail.responses:
            lines.append(
                f"| {response.step_number} | {response.extracted_answer} | {response.response_time_ms} |"
            )

    return "\n".join(lines) + "\n"


def export_evaluation_json(detail: EvaluationDetail) -> str:
    """Export an evaluation with its fingerprint and step responses as JSON."""
    evaluation = detail.evaluation
    fingerprint = detail.fingerprint

    export_data = {
        "evaluation": {
            "id": evaluation.id,
            "model_id": evaluation.model_id,
            "session_id": evaluation.session_id,
            "status": evaluation.status.value,
            "total_tests": evaluation.total_tests,
            "successful_tests": evaluation.successful_tests,
            "failed_tests": evaluation.failed_tests,
            "started_at": evaluation.started_at.isoformat(),
            "completed_at": evaluation.completed_at.isoformat() if evaluation.completed_at else None,
            "duration_seconds": evaluation.duration_seconds,
            "error_message": evaluation.error_message,
        },
        "fingerprint": None,
        "responses": [
            {
                "step_number": r.step_number,
                "prompt": r.prompt,
                "raw_response": r.raw_response,
                "extracted_answer": r.extracted_answer,
                "response_time_ms": r.response_time_ms,
            }
            for r in detail.responses
        ],
    }

    if fingerprint:
        export_data["fingerprint"] = {
            "id": fingerprint.id,
            "checksum": fingerprint.checksum,
            "final_sentence": fingerprint.final_sentence,
            "timestamp": fingerprint.timestamp.isoformat(),
        }

    return json.dumps(export_data, indent=2)
