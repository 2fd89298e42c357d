"""Prometheus metrics for the password validator."""

import time
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import FastAPI, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from password_validator.config import get_settings
from password_validator.logging_config import get_logger

logger = get_logger(__name__)

# Global metrics registry
_metrics: Optional["MetricsRegistry"] = None


COUNTER_NAMES = {
    "validations": "password_validations_total",
    "validation_errors": "password_validation_errors_total",
    "remote_rule_calls": "remote_rule_calls_total",
}


class MetricsRegistry:
    """Named business metrics backed by a private prometheus registry."""

    def __init__(self, prefix: str = "pwv"):
        self.prefix = prefix
        self.registry = CollectorRegistry()

        self._counters: dict[str, Counter] = {
            "validations": Counter(
                self._counter_name("validations"),
                "Completed password validations",
                ["result"],
                registry=self.registry,
            ),
            "validation_errors": Counter(
                self._counter_name("validation_errors"),
                "Password validations aborted by an error",
                ["error"],
                registry=self.registry,
            ),
            "remote_rule_calls": Counter(
                self._counter_name("remote_rule_calls"),
                "Programmatic rule checks by outcome",
                ["outcome"],  # accepted, rejected, skipped, failed
                registry=self.registry,
            ),
        }
        self._histograms: dict[str, Histogram] = {
            "validation_duration": Histogram(
                f"{prefix}_password_validation_duration_seconds",
                "Password validation duration in seconds",
                buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5],
                registry=self.registry,
            ),
        }

    def _counter_name(self, name: str) -> str:
        return f"{self.prefix}_{COUNTER_NAMES[name]}"

    def inc_counter(self, name: str, value: int = 1, **labels: str) -> None:
        """Increment a counter."""
        counter = self._counters[name]
        if labels:
            counter.labels(**labels).inc(value)
        else:
            counter.inc(value)

    def get_counter(self, name: str, **labels: str) -> float:
        """Current value of a counter, 0 when never incremented."""
        sample = self._counter_name(name)
        value = self.registry.get_sample_value(sample, labels or None)
        return value or 0.0

    def observe_histogram(self, name: str, value: float, **labels: str) -> None:
        """Record a histogram observation."""
        histogram = self._histograms[name]
        if labels:
            histogram.labels(**labels).observe(value)
        else:
            histogram.observe(value)

    @contextmanager
    def time_histogram(self, name: str, **labels: str) -> Iterator[None]:
        """Time a block and record it in a histogram."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe_histogram(name, time.perf_counter() - start, **labels)

    def render(self) -> bytes:
        """Prometheus text exposition of all metrics."""
        return generate_latest(self.registry)


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry(prefix=get_settings().metrics_prefix)
    return _metrics


def configure_prometheus_metrics(app: FastAPI) -> None:
    """Expose the metrics registry at /metrics."""
    if not get_settings().metrics_enabled:
        logger.info("Metrics disabled")
        return

    metrics = get_metrics()

    @app.get("/metrics", tags=["monitoring"], include_in_schema=True)
    async def prometheus_metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(content=metrics.render(), media_type=CONTENT_TYPE_LATEST)

    logger.info("Prometheus metrics endpoint enabled")
