"""FastAPI dependency injection helpers.

Usage in a route::

    @router.post("/transactionupdate")
    async def handler(
        engine: Annotated[AlertEngine, Depends(get_engine)],
        _: Annotated[None, Depends(require_ingress_secret)],
    ) -> ...:
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from solsignal.api.middleware.auth import verify_shared_secret
from solsignal.engine.client import AlertEngine  # noqa: TC001


def get_engine(request: Request) -> AlertEngine:
    """Retrieve the engine from ``app.state``.

    The engine is stored on ``app.state.engine`` during lifespan startup.

    Raises:
        RuntimeError: If the engine is not initialized.
    """
    engine: AlertEngine | None = getattr(request.app.state, "engine", None)
    if engine is None or not engine.is_initialized:
        msg = "Alert engine is not initialized"
        raise RuntimeError(msg)
    return engine


def require_ingress_secret(
    request: Request,
    engine: Annotated[AlertEngine, Depends(get_engine)],
) -> None:
    """Reject the request unless it carries the configured shared secret."""
    ingress = engine.config.ingress
    verify_shared_secret(ingress, request.headers.get(ingress.header_name))
