"""
Defines and manages Prometheus metrics for the extraction pipeline.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram
from prometheus_client import generate_latest

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Defined before any metric creation so that re-importing this module during
# the test suite reuses the collectors already in the default registry.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        # Counters register under both "x" and "x_total"
        for key in (name, f"{name}_total"):
            existing = _PROM_REGISTRY._names_to_collectors.get(key)
            if existing is not None:
                return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "documents_parsed": Counter(
            "siftcore_documents_parsed_total",
            "Total number of documents parsed, by outcome",
            ["outcome"],
        ),
        "retries": Counter(
            "siftcore_relaxed_retries_total",
            "Total number of relaxed retry passes run for short extractions",
        ),
        "site_extractor_hits": Counter(
            "siftcore_site_extractor_hits_total",
            "Total number of documents handled by a site-specific extractor",
            ["extractor_type"],
        ),
        "parse_duration_seconds": Histogram(
            "siftcore_parse_duration_seconds",
            "Wall-clock time taken to parse a document",
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
        ),
        "word_count": Histogram(
            "siftcore_word_count",
            "Distribution of extracted word counts",
            buckets=[0, 50, 100, 200, 500, 1000, 2000, 5000, 10000],
        ),
        "clutter_removed": Counter(
            "siftcore_clutter_removed_total",
            "Total number of elements removed by the clutter-removal pass",
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


def increment(name: str, value: float = 1.0, labels: Optional[Dict[str, Any]] = None) -> None:
    """Increment a counter metric."""
    metric = METRICS.get(name)
    if metric is None:
        return
    if labels is not None:
        metric.labels(**labels).inc(value)
    else:
        metric.inc(value)


def observe(name: str, value: float, labels: Optional[Dict[str, Any]] = None) -> None:
    """Observe a histogram metric."""
    metric = METRICS.get(name)
    if metric is None:
        return
    if labels is not None:
        metric.labels(**labels).observe(value)
    else:
        metric.observe(value)


def export_prometheus() -> str:
    """Export metrics in Prometheus text format."""
    return generate_latest().decode("utf-8")
