"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from starlette.responses import Response

from solsignal import __version__
from solsignal.api.webhooks import router as webhooks_router
from solsignal.config.settings import AppConfig
from solsignal.engine.client import AlertEngine
from solsignal.errors.alert_errors import AlertError, ConfigurationError
from solsignal.metrics.middleware import PrometheusMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialise the engine on startup and shut it down on exit."""
    engine: AlertEngine = app.state.engine
    try:
        await engine.initialize()
        logger.info("SolSignal engine initialized")
        yield
    finally:
        await engine.close()
        logger.info("SolSignal engine shut down")


def create_app(
    *,
    config: AppConfig | None = None,
    engine: AlertEngine | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig. If *None*, a default config is created
            from environment variables.
        engine: Optional pre-built (not yet initialized) engine; the lifespan
            initializes and closes it.
    """
    if engine is None:
        if config is None:
            config = AppConfig()
        engine = AlertEngine(config)
    config = engine.config

    app = FastAPI(
        title="solsignal",
        version=__version__,
        description="Wallet activity alerts for Solana addresses",
        lifespan=_lifespan,
    )
    app.state.config = config
    app.state.engine = engine

    # -- Error handler --
    @app.exception_handler(AlertError)
    async def _alert_error_handler(request: Request, exc: AlertError) -> JSONResponse:
        if isinstance(exc, ConfigurationError):
            logger.critical("Configuration error on %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": exc.code, "message": exc.message},
        )

    # -- Base routes --
    @app.get("/health", tags=["base"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    if config.metrics.enabled:
        registry = engine.metrics.registry

        @app.get("/metrics", tags=["base"], include_in_schema=False)
        async def metrics_endpoint() -> Response:
            """Prometheus metrics endpoint."""
            return Response(
                content=generate_latest(registry),
                media_type="text/plain; version=0.0.4; charset=utf-8",
            )

        app.add_middleware(PrometheusMiddleware, registry=registry)

    app.include_router(webhooks_router)

    return app
