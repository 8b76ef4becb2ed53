"""Step table component for displaying chain step responses."""

from typing import Union

import streamlit as st

from core.fingerprint import StepResult
from core.models import PromptResponse
from core.prompt_builder import ERROR_SENTINEL


def render_step_table(steps: list[Union[StepResult, PromptResponse]]) -> None:
    """
    Render one expandable row per chain step.

    Failed steps are flagged and expanded so the raw response is visible.
    """
    for step in steps:
        failed = step.extracted_answer == ERROR_SENTINEL
        label = f"Step {step.step_number}: {step.extracted_answer}"
        if failed:
            label = f"❌ {label}"

        with st.expander(label, expanded=failed):
            st.markdown("**Prompt**")
            st.info(step.prompt)
            st.markdown("**Raw response**")
            st.code(step.raw_response or "(empty)", language="json")
            st.caption(f"{step.response_time_ms} ms")


def render_fingerprint(checksum: str, final_sentence: str) -> None:
    """Render a fingerprint with the sentence it was computed from."""
    st.markdown("**Fingerprint**")
    st.code(checksum, language=None)
    st.markdown("**Final sentence**")
    st.success(final_sentence)
