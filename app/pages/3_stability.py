"""Stability page showing how often each model's fingerprint changes."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import streamlit as st

from app.state import init_state
from core.database import init_db
from core.stability import DEFAULT_PERIOD_DAYS, StabilityManager, summarize

STATUS_ICONS = {"stable": "🟢", "warning": "🟡", "critical": "🔴"}

# Initialize
init_state()
init_db()

st.title("Fingerprint Stability")

period_days = st.sidebar.slider("Period (days)", 1, 90, DEFAULT_PERIOD_DAYS)

stability = StabilityManager()
metrics = stability.get_metrics(period_days=period_days)

if not metrics:
    st.info("No fingerprints in this period yet.")
    st.stop()

summary = summarize(metrics)
col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric("Models", summary.total_models)
with col2:
    st.metric("Stable", summary.stable_models)
with col3:
    st.metric("Warning", summary.warning_models)
with col4:
    st.metric("Critical", summary.critical_models)

st.dataframe(
    [
        {
            "": STATUS_ICONS.get(m.status, ""),
            "Provider": m.provider,
            "Model": m.model_name,
            "Score": m.stability_score,
            "Unique fingerprints": m.unique_fingerprints,
            "Evaluations": m.total_evaluations,
            "Changes/day": m.changes_per_day,
            "Last change": m.last_change.strftime("%Y-%m-%d %H:%M") if m.last_change else "",
            "Current": m.current_fingerprint,
        }
        for m in sorted(metrics, key=lambda m: m.stability_score)
    ],
    use_container_width=True,
    hide_index=True,
)

st.markdown("---")
st.subheader("Change history")
selected = st.selectbox(
    "Model",
    options=[m.model_id for m in metrics],
    format_func=lambda x: next(f"{m.provider} / {m.model_name}" for m in metrics if m.model_id == x),
)
for change in reversed(stability.get_changes(selected)):
    previous = change.previous_fingerprint[:8] if change.previous_fingerprint else "-"
    st.markdown(
        f"`{change.timestamp.strftime('%Y-%m-%d %H:%M')}` {previous} → **{change.new_fingerprint[:8]}**"
    )
