"""Metrics collector — Prometheus counters, gauges, histograms.

- ``solsignal_alerts_sent_total`` counter-vec (status: success | fail)
- ``solsignal_registry_sync_total`` counter-vec (operation, outcome)
- ``solsignal_alerts_live`` gauge (last recomputed aggregate count)
- ``solsignal_dispatch_duration_seconds`` histogram
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

if TYPE_CHECKING:
    from collections.abc import Iterator

_PREFIX = "solsignal"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`AlertMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def gauge(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Gauge:
        return Gauge(name, doc, labels, registry=self._registry)

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        return Counter(name, doc, labels, registry=self._registry)


class AlertMetrics:
    """High-level metrics for the fan-out and registry sync paths."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._sent = self._collector.counter(
            f"{_PREFIX}_alerts_sent",
            "Alert notification attempts by outcome",
            ("status",),
        )
        self._registry_sync = self._collector.counter(
            f"{_PREFIX}_registry_sync",
            "Registry add/remove calls by outcome",
            ("operation", "outcome"),
        )
        self._live = self._collector.gauge(
            f"{_PREFIX}_alerts_live",
            "Live alert count as of the last aggregate recompute",
        )
        self._dispatch = self._collector.histogram(
            f"{_PREFIX}_dispatch_duration_seconds",
            "Duration of one activity batch dispatch",
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._collector.registry

    def record_delivery(self, status: str) -> None:
        self._sent.labels(status=status).inc()

    def record_registry_sync(self, operation: str, outcome: str) -> None:
        self._registry_sync.labels(operation=operation, outcome=outcome).inc()

    def set_live_alerts(self, count: int) -> None:
        self._live.set(count)

    @contextmanager
    def track_dispatch(self) -> Iterator[None]:
        """Track the duration of one batch dispatch."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._dispatch.observe(time.monotonic() - start)
