"""Fingerprint stability metrics for Basma."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .catalog_manager import CatalogManager
from .evaluation_store import EvaluationStore
from .models import Fingerprint, utc_now

DEFAULT_PERIOD_DAYS = 30

# Changes per day at or below which a model counts as stable / warning
STABLE_THRESHOLD = 0.1
WARNING_THRESHOLD = 0.5


@dataclass
class FingerprintChangeEvent:
    """The checksum of a model differs from its previous fingerprint."""

    timestamp: datetime
    previous_fingerprint: Optional[str]
    new_fingerprint: str
    evaluation_id: Optional[str]


@dataclass
class FingerprintMetrics:
    """Stability of one model over the reporting period."""

    model_id: str
    provider: str
    model_name: str
    stability_score: int  # 0-100, 100 = most stable
    unique_fingerprints: int
    total_evaluations: int
    changes_per_day: float
    last_change: Optional[datetime]
    status: str  # 'stable', 'warning', 'critical'
    current_fingerprint: Optional[str]
    evaluations_period: int


@dataclass
class DashboardSummary:
    total_models: int
    stable_models: int
    warning_models: int
    critical_models: int
    average_stability_score: float


def detect_changes(fingerprints: list[Fingerprint]) -> list[FingerprintChangeEvent]:
    """
    Find every point where a model's checksum changed.

    Expects fingerprints of a single model. The first fingerprint counts as
    a change from nothing.
    """
    events = []
    previous = None
    for fp in sorted(fingerprints, key=lambda f: f.timestamp):
        if fp.checksum != previous:
            events.append(
                FingerprintChangeEvent(
                    timestamp=fp.timestamp,
                    previous_fingerprint=previous,
                    new_fingerprint=fp.checksum,
                    evaluation_id=fp.evaluation_id,
                )
            )
            previous = fp.checksum
    return events


def stability_status(changes_per_day: float) -> str:
    if changes_per_day <= STABLE_THRESHOLD:
        return "stable"
    if changes_per_day <= WARNING_THRESHOLD:
        return "warning"
    return "critical"


def compute_metrics(
    model_id: str,
    provider: str,
    model_name: str,
    fingerprints: list[Fingerprint],
    period_days: int = DEFAULT_PERIOD_DAYS,
) -> FingerprintMetrics:
    """Compute stability metrics from one model's fingerprints in the period."""
    unique = {fp.checksum for fp in fingerprints}
    changes_per_day = len(unique) / period_days
    # One change per day scores zero
    stability_score = max(0.0, 100 - changes_per_day * 100)

    changes = detect_changes(fingerprints)
    latest = max(fingerprints, key=lambda f: f.timestamp) if fingerprints else None

    return FingerprintMetrics(
        model_id=model_id,
        provider=provider,
        model_name=model_name,
        stability_score=round(stability_score),
        unique_fingerprints=len(unique),
        total_evaluations=len(fingerprints),
        changes_per_day=round(changes_per_day, 2),
        last_change=changes[-1].timestamp if changes else None,
        status=stability_status(changes_per_day),
        current_fingerprint=latest.checksum[:8] if latest else None,
        evaluations_period=period_days,
    )


def summarize(metrics: list[FingerprintMetrics]) -> DashboardSummary:
    scores = [m.stability_score for m in metrics]
    return DashboardSummary(
        total_models=len(metrics),
        stable_models=sum(1 for m in metrics if m.status == "stable"),
        warning_models=sum(1 for m in metrics if m.status == "warning"),
        critical_models=sum(1 for m in metrics if m.status == "critical"),
        average_stability_score=round(sum(scores) / len(scores), 1) if scores else 0.0,
    )


class StabilityManager:
    """Reads fingerprints from the database and reports per-model stability."""

    def __init__(
        self,
        store: Optional[EvaluationStore] = None,
        catalog: Optional[CatalogManager] = None,
    ):
        self.store = store or EvaluationStore()
        self.catalog = catalog or CatalogManager()

    def get_metrics(self, period_days: int = DEFAULT_PERIOD_DAYS) -> list[FingerprintMetrics]:
        """Metrics for every model with at least one fingerprint in the period."""
        since = utc_now() - timedelta(days=period_days)
        by_model: dict[str, list[Fingerprint]] = {}
        for fp in self.store.list_fingerprints(since=since):
            by_model.setdefault(fp.model_id, []).append(fp)

        metrics = []
        for model, provider in self.catalog.list_models():
            fingerprints = by_model.get(model.id)
            if not fingerprints:
                continue
            metrics.append(
                compute_metrics(
                    model_id=model.id,
                    provider=provider.display_name,
                    model_name=model.display_name,
                    fingerprints=fingerprints,
                    period_days=period_days,
                )
            )
        return metrics

    def get_changes(self, model_id: str) -> list[FingerprintChangeEvent]:
        """Full change history of a model."""
        return detect_changes(self.store.list_fingerprints(model_id=model_id))
