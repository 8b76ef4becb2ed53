"""Tests for fingerprint stability metrics."""

from __future__ import annotations

from datetime import datetime, timedelta

from core.models import Fingerprint
from core.stability import (
    StabilityManager,
    compute_metrics,
    detect_changes,
    stability_status,
    summarize,
)

T0 = datetime(2026, 1, 1, 12, 0, 0)


def _fp(checksum: str, hours: int, evaluation_id: str = "e") -> Fingerprint:
    return Fingerprint(
        checksum=checksum,
        final_sentence="s",
        model_id="m",
        evaluation_id=f"{evaluation_id}{hours}",
        timestamp=T0 + timedelta(hours=hours),
    )


class TestDetectChanges:
    def test_first_fingerprint_is_a_change(self):
        [event] = detect_changes([_fp("aaa", 0)])
        assert event.previous_fingerprint is None
        assert event.new_fingerprint == "aaa"

    def test_repeated_checksum_is_not_a_change(self):
        events = detect_changes([_fp("aaa", 0), _fp("aaa", 1), _fp("bbb", 2), _fp("bbb", 3), _fp("aaa", 4)])
        assert [(e.previous_fingerprint, e.new_fingerprint) for e in events] == [
            (None, "aaa"),
            ("aaa", "bbb"),
            ("bbb", "aaa"),
        ]
        assert events[-1].timestamp == T0 + timedelta(hours=4)
        assert events[1].evaluation_id == "e2"

    def test_input_order_does_not_matter(self):
        ordered = detect_changes([_fp("aaa", 0), _fp("bbb", 1)])
        shuffled = detect_changes([_fp("bbb", 1), _fp("aaa", 0)])
        assert ordered == shuffled

    def test_empty(self):
        assert detect_changes([]) == []


class TestComputeMetrics:
    def test_single_fingerprint_is_stable(self):
        metrics = compute_metrics("m", "Fake", "Model", [_fp("abcdef0123", 0), _fp("abcdef0123", 5)])

        assert metrics.unique_fingerprints == 1
        assert metrics.total_evaluations == 2
        assert metrics.changes_per_day == 0.03
        assert metrics.stability_score == 97
        assert metrics.status == "stable"
        assert metrics.current_fingerprint == "abcdef01"
        assert metrics.last_change == T0
        assert metrics.evaluations_period == 30

    def test_many_fingerprints_are_critical(self):
        fingerprints = [_fp(f"{i:032x}", i) for i in range(20)]
        metrics = compute_metrics("m", "Fake", "Model", fingerprints)

        assert metrics.changes_per_day == 0.67
        assert metrics.stability_score == 33
        assert metrics.status == "critical"
        assert metrics.current_fingerprint == f"{19:032x}"[:8]

    def test_score_floors_at_zero(self):
        fingerprints = [_fp(f"{i:032x}", i) for i in range(5)]
        metrics = compute_metrics("m", "Fake", "Model", fingerprints, period_days=1)
        assert metrics.stability_score == 0

    def test_status_thresholds(self):
        assert stability_status(0.1) == "stable"
        assert stability_status(0.11) == "warning"
        assert stability_status(0.5) == "warning"
        assert stability_status(0.51) == "critical"


class TestSummarize:
    def test_summary(self):
        metrics = [
            compute_metrics("a", "P", "A", [_fp("x", 0)]),
            compute_metrics("b", "P", "B", [_fp(f"{i}", i) for i in range(10)]),
        ]
        summary = summarize(metrics)
        assert summary.total_models == 2
        assert summary.stable_models == 1
        assert summary.warning_models == 1
        assert summary.critical_models == 0
        assert summary.average_stability_score == (97 + 67) / 2

    def test_empty(self):
        assert summarize([]).average_stability_score == 0.0


class TestStabilityManager:
    def test_metrics_from_database(self, store, catalog, model_id):
        catalog.upsert_model("fake", "never-run")
        for checksum in ("a" * 32, "a" * 32, "b" * 32):
            evaluation = store.create_evaluation(model_id, total_tests=10)
            store.create_fingerprint(evaluation.id, model_id, checksum, "s", [])

        [metrics] = StabilityManager().get_metrics()

        assert metrics.model_id == model_id
        assert metrics.provider == "Fake Provider"
        assert metrics.model_name == "Fake Model"
        assert metrics.total_evaluations == 3
        assert metrics.unique_fingerprints == 2

    def test_changes_for_model(self, store, model_id):
        for checksum in ("a" * 32, "b" * 32):
            evaluation = store.create_evaluation(model_id, total_tests=10)
            store.create_fingerprint(evaluation.id, model_id, checksum, "s", [])

        changes = StabilityManager().get_changes(model_id)
        assert sorted(c.new_fingerprint for c in changes) == ["a" * 32, "b" * 32]
