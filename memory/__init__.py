# Memory layer - MLflow evaluation traces
from .trace_logger import TraceLogger
from .mlflow_config import init_mlflow, get_or_create_experiment

__all__ = [
    "TraceLogger",
    "init_mlflow",
    "get_or_create_experiment",
]
