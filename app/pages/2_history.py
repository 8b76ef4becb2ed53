"""History page for browsing and exporting past evaluations."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import streamlit as st

from app.state import (
    init_state,
    get_history_offset,
    set_history_offset,
    get_last_evaluation_id,
)
from app.components.step_table import render_step_table, render_fingerprint
from core.catalog_manager import CatalogManager
from core.database import init_db
from core.evaluation_manager import EvaluationManager
from core.export import export_evaluation_json, export_fingerprint_markdown

PAGE_SIZE = 20

# Initialize
init_state()
init_db()

st.title("Evaluation History")

manager = EvaluationManager()
catalog = CatalogManager()

model_names = {m.id: f"{p.display_name} / {m.display_name}" for m, p in catalog.list_models()}

# Sidebar: filter
st.sidebar.header("Filter")
model_filter = st.sidebar.selectbox(
    "Model",
    options=[None] + list(model_names.keys()),
    format_func=lambda x: "All models" if x is None else model_names[x],
)

offset = get_history_offset()
page = manager.list_evaluations(model_id=model_filter, limit=PAGE_SIZE, offset=offset)

if not page.evaluations:
    st.info("No evaluations yet. Run one from the Run page.")
    st.page_link("pages/1_run.py", label="Go to Run")
    st.stop()

st.caption(f"Showing {offset + 1}-{offset + len(page.evaluations)} of {page.total}")

evaluation_options = {
    e.id: (
        f"{e.started_at.strftime('%Y-%m-%d %H:%M')} · "
        f"{model_names.get(e.model_id, e.model_id)} · {e.status.value}"
    )
    for e in page.evaluations
}
last_id = get_last_evaluation_id()
selected_id = st.selectbox(
    "Evaluation",
    options=list(evaluation_options.keys()),
    format_func=lambda x: evaluation_options[x],
    index=list(evaluation_options.keys()).index(last_id) if last_id in evaluation_options else 0,
)

col_prev, col_next = st.columns(2)
with col_prev:
    if st.button("Previous page", disabled=offset == 0):
        set_history_offset(offset - PAGE_SIZE)
        st.rerun()
with col_next:
    if st.button("Next page", disabled=not page.has_more):
        set_history_offset(offset + PAGE_SIZE)
        st.rerun()

detail = manager.get_evaluation_detail(selected_id)
if not detail:
    st.error("Evaluation not found.")
    st.stop()

evaluation = detail.evaluation

st.markdown("---")
col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric("Status", evaluation.status.value)
with col2:
    st.metric("Successful", f"{evaluation.successful_tests}/{evaluation.total_tests}")
with col3:
    st.metric("Failed", evaluation.failed_tests)
with col4:
    st.metric("Duration", f"{evaluation.duration_seconds or 0}s")

if evaluation.error_message:
    st.error(evaluation.error_message)

if detail.fingerprint:
    render_fingerprint(detail.fingerprint.checksum, detail.fingerprint.final_sentence)
    st.subheader("Steps")
    render_step_table(detail.responses)

st.markdown("---")
st.subheader("Export")
col_md, col_json = st.columns(2)
with col_md:
    st.download_button(
        "Download Markdown",
        data=export_fingerprint_markdown(detail),
        file_name=f"evaluation_{evaluation.id[:8]}.md",
        mime="text/markdown",
    )
with col_json:
    st.download_button(
        "Download JSON",
        data=export_evaluation_json(detail),
        file_name=f"evaluation_{evaluation.id[:8]}.json",
        mime="application/json",
    )
