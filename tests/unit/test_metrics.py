"""
Unit tests for the Prometheus metrics helpers.
"""

from siftcore.extractor import sift
from siftcore.observability import METRICS, export_prometheus, increment, observe
from siftcore.observability.metrics import _create_metrics

from tests.helpers.html import page, prose
from tests.helpers.metric_delta import counter_value, histogram_observes, metric_delta


class TestMetricHelpers:
    """increment / observe / export."""

    def test_increment_unlabelled(self):
        with metric_delta(METRICS["clutter_removed"], expected_delta=3):
            increment("clutter_removed", 3)

    def test_increment_labelled(self):
        labels = {"extractor_type": "metrics-test"}
        with metric_delta(METRICS["site_extractor_hits"], labels=labels):
            increment("site_extractor_hits", labels=labels)

    def test_unknown_metric_is_ignored(self):
        increment("no_such_metric")
        observe("no_such_histogram", 1.0)

    def test_observe(self):
        with histogram_observes(METRICS["word_count"]):
            observe("word_count", 420)

    def test_export_contains_all_metrics(self):
        increment("documents_parsed", labels={"outcome": "generic"})
        exported = export_prometheus()
        for name in (
            "siftcore_documents_parsed_total",
            "siftcore_relaxed_retries_total",
            "siftcore_parse_duration_seconds",
            "siftcore_word_count",
            "siftcore_clutter_removed_total",
        ):
            assert name in exported

    def test_recreating_metrics_reuses_collectors(self):
        recreated = _create_metrics()
        for name, metric in recreated.items():
            assert metric is METRICS[name]


class TestMetricsToggle:
    """The monitoring.metrics_enabled setting."""

    def test_parse_records_metrics(self):
        html = page(f"<article>{prose(7)}</article>")
        with metric_delta(METRICS["documents_parsed"], labels={"outcome": "generic"}):
            with histogram_observes(METRICS["word_count"]):
                sift(html)

    def test_disabled_records_nothing(self, tmp_path):
        (tmp_path / "siftcore.yaml").write_text("monitoring:\n  metrics_enabled: false\n", encoding="utf-8")
        before = counter_value(METRICS["retries"])

        with metric_delta(METRICS["documents_parsed"], expected_delta=0, labels={"outcome": "generic"}):
            sift(page(f"<article>{prose(2)}</article>"))

        assert counter_value(METRICS["retries"]) == before
