"""
SQLite storage for Basma.

One database file holds the provider and model catalog, every evaluation
with its lifecycle status, and the fingerprints and per-step prompt
responses of completed evaluations. Set DATABASE_PATH to relocate it.
"""

import os
from pathlib import Path

from sqlmodel import SQLModel, create_engine, Session as SQLSession

# Default location, next to the MLflow run store
DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "basma.db"

_engine = None


def get_database_path() -> Path:
    """Get the database path from environment or use default."""
    db_path = os.getenv("DATABASE_PATH")
    if db_path:
        return Path(db_path)
    return DEFAULT_DB_PATH


def get_engine():
    """Get or create the SQLAlchemy engine singleton."""
    global _engine
    if _engine is None:
        db_path = get_database_path()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{db_path}",
            echo=False,
            connect_args={"check_same_thread": False},
        )
    return _engine


def init_db():
    """Create the catalog, evaluation and fingerprint tables if missing."""
    from .models import Provider, LLMModel, Evaluation, Fingerprint, PromptResponse  # noqa: F401

    engine = get_engine()
    SQLModel.metadata.create_all(engine)


def get_session() -> SQLSession:
    """Open a session; callers expunge what they return before it closes."""
    engine = get_engine()
    return SQLSession(engine)
