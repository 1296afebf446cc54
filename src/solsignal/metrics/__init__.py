"""Prometheus metrics for the alert pipeline."""

from solsignal.metrics.collector import AlertMetrics, MetricsCollector
from solsignal.metrics.middleware import PrometheusMiddleware

__all__ = ["AlertMetrics", "MetricsCollector", "PrometheusMiddleware"]
