"""Catalog page for registering providers and models."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import streamlit as st

from app.state import init_state
from core.catalog_manager import CatalogManager
from core.database import init_db
from llm.registry import default_registry

# Initialize
init_state()
init_db()

st.title("Model Catalog")

catalog = CatalogManager()
supported_providers = default_registry().providers()

# Provider form
st.subheader("Add Provider")
with st.form("provider_form", clear_on_submit=True):
    provider_name = st.selectbox("Provider", options=supported_providers)
    provider_display = st.text_input("Display name", placeholder="OpenAI")
    api_base_url = st.text_input(
        "API base URL (optional)",
        help="Overrides the provider's default OpenAI-compatible endpoint",
    )
    if st.form_submit_button("Save provider"):
        catalog.upsert_provider(provider_name, provider_display or None, api_base_url or None)
        st.success(f"Saved provider {provider_name}")

providers = catalog.list_providers()

# Model form
st.subheader("Add Model")
if not providers:
    st.info("Add a provider first.")
else:
    with st.form("model_form", clear_on_submit=True):
        model_provider = st.selectbox(
            "Provider",
            options=[p.name for p in providers],
            format_func=lambda x: next(p.display_name for p in providers if p.name == x),
        )
        model_name = st.text_input("Model name", placeholder="gpt-4o-mini")
        model_display = st.text_input("Display name (optional)")
        if st.form_submit_button("Save model"):
            if not model_name.strip():
                st.error("Model name is required.")
            else:
                catalog.upsert_model(model_provider, model_name.strip(), model_display or None)
                st.success(f"Saved model {model_name}")

# Model list
st.markdown("---")
st.subheader("Models")
for model, provider in catalog.list_models():
    col1, col2 = st.columns([4, 1])
    with col1:
        st.markdown(f"**{provider.display_name} / {model.display_name}** `{model.name}`")
        st.caption(model.id)
    with col2:
        active = st.toggle("Active", value=model.is_active, key=f"active_{model.id}")
        if active != model.is_active:
            catalog.set_model_active(model.id, active)
            st.rerun()
