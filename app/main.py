"""Main entry point for Basma - Model Fingerprint Monitor."""

import logging
import os
import sys
from pathlib import Path

# Ensure project root is on the module path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import streamlit as st
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize database
from core.database import init_db

init_db()

# Initialize MLflow memory layer
from memory.mlflow_config import init_mlflow

init_mlflow()

# Page configuration
st.set_page_config(
    page_title="Basma - Model Fingerprint Monitor",
    page_icon="🔍",
    layout="wide",
    initial_sidebar_state="expanded",
)

from app.state import init_state

init_state()

st.title("Basma")
st.subheader("Model Fingerprint Monitor")

st.markdown("""
Basma watches LLM providers for silent behavioral drift, such as a model being
swapped for a quantized variant behind the same name.

### How it works

1. **Chain**: The model completes a ten-step story, one word at a time. Each
   step's prompt embeds every answer the model gave before it.
2. **Sentence**: The answers are assembled into a final sentence.
3. **Fingerprint**: The sentence is hashed with BLAKE3. With temperature
   pinned to 0 an unchanged model should keep producing the same fingerprint.
4. **Stability**: A fingerprint that keeps changing is a sign the model
   behind the API has changed.

### Getting Started

- **Catalog**: Register providers and models
- **Run**: Evaluate a model
- **History**: Browse past evaluations and export them
- **Stability**: See how often each model's fingerprint changes
""")

from core.stability import StabilityManager, summarize

summary = summarize(StabilityManager().get_metrics())
if summary.total_models:
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Fleet")
    st.sidebar.markdown(f"**{summary.total_models}** models fingerprinted")
    st.sidebar.markdown(f"Average stability: {summary.average_stability_score}")
