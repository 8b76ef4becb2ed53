"""Prompt chain definition for Basma fingerprinting."""

import re
from dataclasses import dataclass, field
from typing import Optional

from .errors import ChainConfigurationError

BLANK_MARKER = "____"
ANSWER_PLACEHOLDER = re.compile(r"\{ANSWER_(\d+)\}")


def answer_placeholder(step: int) -> str:
    """Placeholder text standing in for the answer to a step."""
    return f"{{ANSWER_{step}}}"


@dataclass(frozen=True)
class PromptTemplate:
    """A single step of a prompt chain."""

    id: str
    step: int
    template: str
    description: str = ""

    def referenced_steps(self) -> list[int]:
        """Steps whose answers this template consumes, in order of appearance."""
        return [int(m) for m in ANSWER_PLACEHOLDER.findall(self.template)]


@dataclass(frozen=True)
class PromptChain:
    """
    An ordered, immutable chain of sentence-completion templates.

    Validated on construction:
    - steps are exactly 1..N with no gaps or duplicates
    - every template references only answers from earlier steps
    - the last template contains exactly one blank marker
    """

    name: str
    description: str
    templates: tuple[PromptTemplate, ...]
    system_prompt: Optional[str] = None
    blank_marker: str = BLANK_MARKER
    _by_step: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        templates = tuple(sorted(self.templates, key=lambda t: t.step))
        object.__setattr__(self, "templates", templates)
        self._validate()
        object.__setattr__(self, "_by_step", {t.step: t for t in templates})

    def _validate(self) -> None:
        if not self.templates:
            raise ChainConfigurationError(f"Chain '{self.name}' has no templates")

        steps = [t.step for t in self.templates]
        expected = list(range(1, len(self.templates) + 1))
        if steps != expected:
            raise ChainConfigurationError(
                f"Chain '{self.name}' steps must be exactly {expected}, got {steps}"
            )

        ids = [t.id for t in self.templates]
        if len(set(ids)) != len(ids):
            raise ChainConfigurationError(f"Chain '{self.name}' has duplicate template ids")

        for template in self.templates:
            for ref in template.referenced_steps():
                if ref >= template.step:
                    raise ChainConfigurationError(
                        f"Step {template.step} of chain '{self.name}' references "
                        f"answer {ref}, which is not yet available"
                    )

        last = self.templates[-1]
        if last.template.count(self.blank_marker) != 1:
            raise ChainConfigurationError(
                f"Final step of chain '{self.name}' must contain exactly one "
                f"'{self.blank_marker}' blank"
            )

    @property
    def total_steps(self) -> int:
        return len(self.templates)

    @property
    def final_template(self) -> PromptTemplate:
        return self.templates[-1]

    def get_template(self, step: int) -> Optional[PromptTemplate]:
        return self._by_step.get(step)


_PREFIX_1 = "The meeting was extremely {ANSWER_1}."
_PREFIX_2 = _PREFIX_1 + " The manager felt increasingly {ANSWER_2},"
_PREFIX_3 = _PREFIX_2 + " so she decided to be more {ANSWER_3}"
_PREFIX_4 = _PREFIX_3 + " and include exactly {ANSWER_4} team members."
_PREFIX_5 = _PREFIX_4 + " The project would launch in {ANSWER_5}"
_PREFIX_6 = _PREFIX_5 + " with a budget that was {ANSWER_6}."
_PREFIX_7 = _PREFIX_6 + " Payments would arrive {ANSWER_7},"
_PREFIX_8 = _PREFIX_7 + " making the plan seem {ANSWER_8}."
_PREFIX_9 = _PREFIX_8 + " Everyone became remarkably {ANSWER_9},"

QUANTIZATION_CHAIN = PromptChain(
    name="quantization_detection",
    description="Progressive sentence building for model fingerprinting",
    system_prompt=(
        'Complete this sentence with exactly ONE word. '
        'Respond ONLY with valid JSON: {"answer": "your_word"}'
    ),
    templates=(
        PromptTemplate("step_1", 1, "The meeting was extremely ____", "Initial adjective"),
        PromptTemplate(
            "step_2", 2,
            _PREFIX_1 + " The manager felt increasingly ____",
            "Manager's emotional state",
        ),
        PromptTemplate(
            "step_3", 3,
            _PREFIX_2 + " so she decided to be more ____",
            "Manager's behavioral change",
        ),
        PromptTemplate(
            "step_4", 4,
            _PREFIX_3 + " and include exactly ____ team members.",
            "Team size (number)",
        ),
        PromptTemplate(
            "step_5", 5,
            _PREFIX_4 + " The project would launch in ____",
            "Launch timing",
        ),
        PromptTemplate(
            "step_6", 6,
            _PREFIX_5 + " with a budget that was ____",
            "Budget description",
        ),
        PromptTemplate(
            "step_7", 7,
            _PREFIX_6 + " Payments would arrive ____",
            "Payment schedule",
        ),
        PromptTemplate(
            "step_8", 8,
            _PREFIX_7 + " making the plan seem ____",
            "Plan assessment",
        ),
        PromptTemplate(
            "step_9", 9,
            _PREFIX_8 + " Everyone became remarkably ____",
            "Team reaction",
        ),
        PromptTemplate(
            "step_10", 10,
            _PREFIX_9 + " and the outcome was ultimately ____",
            "Final outcome",
        ),
    ),
)
