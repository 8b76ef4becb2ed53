"""Answer extraction and fingerprint hashing for Basma."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Optional

from blake3 import blake3

logger = logging.getLogger(__name__)

# First flat {...} object in the text; nested braces are not matched
_JSON_OBJECT = re.compile(r"\{[^}]+\}")

FINGERPRINT_BYTES = 16


@dataclass
class StepResult:
    """Outcome of one chain step."""

    step_number: int
    prompt: str
    raw_response: str
    extracted_answer: str
    response_time_ms: int


def _answer_from_json(text: str) -> Optional[str]:
    try:
        parsed = json.loads(text)
    except ValueError:
        return None

    if not isinstance(parsed, dict):
        return None
    answer = parsed.get("answer")
    if not isinstance(answer, str):
        return None
    answer = answer.strip()
    try:
        # json.loads lets lone surrogates through; they cannot be hashed
        answer.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return answer or None


def extract_answer(response: Optional[str]) -> Optional[str]:
    """
    Pull the single-word answer out of a model response.

    Accepts a bare {"answer": "..."} object or one embedded in surrounding
    prose or code fences. Returns None for empty responses, missing or
    non-string answers, and anything that does not parse.
    """
    if not response or not response.strip():
        logger.warning("Empty response received from model")
        return None

    match = _JSON_OBJECT.search(response)
    if match:
        answer = _answer_from_json(match.group(0))
        if answer is not None:
            return answer

    answer = _answer_from_json(response.strip())
    if answer is not None:
        return answer

    logger.warning("Could not extract an answer from response: %r", response[:100])
    return None


def calculate_fingerprint(final_sentence: str) -> str:
    """BLAKE3 of the UTF-8 sentence, truncated to 16 bytes, as lowercase hex."""
    return blake3(final_sentence.encode("utf-8")).hexdigest(length=FINGERPRINT_BYTES)
