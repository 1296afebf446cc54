"""Prometheus HTTP request metrics middleware for FastAPI.

Requests are labelled by route template rather than raw path so that
unmatched probes do not create unbounded label sets.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

if TYPE_CHECKING:
    from collections.abc import Callable

    from prometheus_client import CollectorRegistry
    from starlette.requests import Request
    from starlette.responses import Response

_UNMATCHED = "<unmatched>"


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", _UNMATCHED)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that records request count and duration."""

    def __init__(self, app: object, *, registry: CollectorRegistry) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._requests = Counter(
            "solsignal_http_requests",
            "HTTP requests by method, route and status",
            ("method", "route", "status_code"),
            registry=registry,
        )
        self._latency = Histogram(
            "solsignal_http_request_duration_seconds",
            "HTTP request duration in seconds",
            ("method", "route"),
            registry=registry,
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[type-arg]
        start = time.monotonic()
        response: Response = await call_next(request)
        elapsed = time.monotonic() - start

        route = _route_label(request)
        self._requests.labels(request.method, route, str(response.status_code)).inc()
        self._latency.labels(request.method, route).observe(elapsed)
        return response
