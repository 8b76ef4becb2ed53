"""Run page for evaluating a model through the prompt chain."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import streamlit as st

from app.state import (
    init_state,
    get_selected_model_id,
    set_selected_model_id,
    set_last_evaluation_id,
)
from app.components.step_table import render_step_table, render_fingerprint
from core.catalog_manager import CatalogManager
from core.database import init_db
from core.errors import EvaluationError, InvalidRequestError, ModelResolutionError
from core.evaluation_manager import EvaluationManager
from core.evaluation_runner import EvaluationRunner
from core.prompt_chain import QUANTIZATION_CHAIN
from memory.mlflow_config import init_mlflow, get_or_create_experiment
from memory.trace_logger import TraceLogger

# Initialize
init_state()
init_db()

st.title("Run Evaluation")

catalog = CatalogManager()
models = catalog.list_models(active_only=True)

if not models:
    st.info("No active models yet. Register one from the Catalog page.")
    st.page_link("pages/4_catalog.py", label="Go to Catalog")
    st.stop()

model_options = {m.id: f"{p.display_name} / {m.display_name}" for m, p in models}
current_model_id = get_selected_model_id()

selected_model_id = st.selectbox(
    "Model",
    options=list(model_options.keys()),
    format_func=lambda x: model_options[x],
    index=list(model_options.keys()).index(current_model_id) if current_model_id in model_options else 0,
)
set_selected_model_id(selected_model_id)

session_id = st.text_input(
    "Session ID (optional)",
    help="Groups evaluations that belong to the same scheduled sweep",
)

with st.expander(f"Prompt chain: {QUANTIZATION_CHAIN.name} ({QUANTIZATION_CHAIN.total_steps} steps)"):
    st.caption(QUANTIZATION_CHAIN.system_prompt)
    for template in QUANTIZATION_CHAIN.templates:
        st.markdown(f"**{template.step}. {template.description}**")
        st.text(template.template)

if st.button("Run evaluation", type="primary"):
    model, _ = next((m, p) for m, p in models if m.id == selected_model_id)

    init_mlflow()
    trace_logger = None
    try:
        trace_logger = TraceLogger(get_or_create_experiment(model.id, model.name))
    except Exception as e:
        st.caption(f"Tracing disabled: {e}")

    manager = EvaluationManager(runner=EvaluationRunner(trace_logger=trace_logger))

    with st.spinner(f"Running {QUANTIZATION_CHAIN.total_steps} chained prompts..."):
        try:
            result = manager.run_evaluation(selected_model_id, session_id or None)
        except (InvalidRequestError, ModelResolutionError, EvaluationError) as e:
            st.error(str(e))
            st.stop()

    set_last_evaluation_id(result.evaluation_id)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Successful steps", f"{result.successful_tests}/{result.total_tests}")
    with col2:
        st.metric("Failed steps", result.failed_tests)
    with col3:
        st.metric("Duration", f"{result.duration_seconds}s")

    render_fingerprint(result.fingerprint, result.final_sentence)

    st.markdown("---")
    st.subheader("Steps")
    render_step_table(result.steps)
