"""Streamlit session state helpers for Basma."""

import streamlit as st
from typing import Optional, Any


def init_state() -> None:
    """Initialize all session state variables."""
    defaults = {
        # Run state
        "selected_model_id": None,
        "last_evaluation_id": None,
        # History state
        "history_offset": 0,
        "history_model_filter": None,
    }

    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


def get_state(key: str, default: Any = None) -> Any:
    """Get a value from session state."""
    init_state()
    return st.session_state.get(key, default)


def set_state(key: str, value: Any) -> None:
    """Set a value in session state."""
    init_state()
    st.session_state[key] = value


def get_selected_model_id() -> Optional[str]:
    return get_state("selected_model_id")


def set_selected_model_id(model_id: str) -> None:
    set_state("selected_model_id", model_id)


def get_last_evaluation_id() -> Optional[str]:
    """Get the ID of the evaluation run most recently from this browser session."""
    return get_state("last_evaluation_id")


def set_last_evaluation_id(evaluation_id: str) -> None:
    set_state("last_evaluation_id", evaluation_id)


def get_history_offset() -> int:
    return get_state("history_offset", 0)


def set_history_offset(offset: int) -> None:
    set_state("history_offset", max(0, offset))
