"""MLflow configuration and initialization for Basma evaluation traces."""

import os
from pathlib import Path
from typing import Optional

import mlflow

# Default MLflow tracking URI - local file store alongside SQLite DB
DEFAULT_MLFLOW_DIR = Path(__file__).parent.parent / "data" / "mlruns"


def init_mlflow(tracking_uri: Optional[str] = None) -> None:
    """Initialize MLflow tracking."""
    uri = tracking_uri or os.getenv(
        "MLFLOW_TRACKING_URI",
        DEFAULT_MLFLOW_DIR.as_uri(),
    )
    mlflow.set_tracking_uri(uri)


def get_or_create_experiment(model_id: str, model_name: str) -> str:
    """
    Get or create the MLflow experiment holding a model's evaluations.

    Returns the experiment_id.
    """
    experiment_name = f"basma/{model_name}_{model_id[:8]}"
    experiment = mlflow.get_experiment_by_name(experiment_name)
    if experiment:
        return experiment.experiment_id
    return mlflow.create_experiment(experiment_name)
