"""Sequential prompt building for Basma."""

from typing import Iterator, Optional

from .errors import TemplateNotFoundError
from .prompt_chain import PromptChain, PromptTemplate, QUANTIZATION_CHAIN, answer_placeholder

ERROR_SENTINEL = "ERROR"


class AnswerMap:
    """
    Answers accumulated over one evaluation, keyed by step number.

    Each step is written exactly once. Reading a step that has not been
    recorded yields the "ERROR" sentinel.
    """

    def __init__(self, answers: Optional[dict[int, str]] = None):
        self._answers: dict[int, str] = {}
        for step, answer in (answers or {}).items():
            self.record(step, answer)

    def record(self, step: int, answer: str) -> None:
        if step in self._answers:
            raise ValueError(f"Answer for step {step} already recorded")
        self._answers[step] = answer

    def get(self, step: int) -> str:
        return self._answers.get(step) or ERROR_SENTINEL

    def __contains__(self, step: int) -> bool:
        return step in self._answers

    def __len__(self) -> int:
        return len(self._answers)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._answers))

    def as_dict(self) -> dict[int, str]:
        return {step: self._answers[step] for step in self}


class SequentialPromptBuilder:
    """Renders each chain step with the answers from the steps before it."""

    def __init__(self, chain: PromptChain = QUANTIZATION_CHAIN):
        self.chain = chain

    def build_prompt(self, step: int, answers: AnswerMap) -> str:
        """Render the prompt for a step, filling {ANSWER_k} for every k < step."""
        template = self.chain.get_template(step)
        if template is None:
            raise TemplateNotFoundError(f"No template found for step {step}")

        prompt = template.template
        for previous in range(1, step):
            prompt = prompt.replace(answer_placeholder(previous), answers.get(previous), 1)
        return prompt

    @property
    def system_prompt(self) -> Optional[str]:
        return self.chain.system_prompt

    @property
    def total_steps(self) -> int:
        return self.chain.total_steps

    def get_template(self, step: int) -> Optional[PromptTemplate]:
        return self.chain.get_template(step)

    def chain_info(self) -> dict:
        return {"name": self.chain.name, "description": self.chain.description}


def build_final_sentence(answers: AnswerMap, chain: PromptChain = QUANTIZATION_CHAIN) -> str:
    """
    Assemble the sentence that gets fingerprinted.

    Takes the final step's template, fills {ANSWER_1}..{ANSWER_N-1} and then
    the blank with the final answer. Substitutions replace the first
    occurrence only, in ascending step order; the resulting bytes must not
    change or fingerprints stop being comparable.
    """
    total = chain.total_steps
    sentence = chain.final_template.template

    for step in range(1, total):
        sentence = sentence.replace(answer_placeholder(step), answers.get(step), 1)
    sentence = sentence.replace(chain.blank_marker, answers.get(total), 1)

    return sentence
