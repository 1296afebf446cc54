"""Application entry point for the SolSignal alerts server."""

from __future__ import annotations

import logging
import os

import uvicorn

from solsignal.config.settings import AppConfig


def main() -> None:
    """Start the SolSignal alerts server."""
    config = AppConfig()
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    reload = os.getenv("SOLSIGNAL_RELOAD", "false").lower() in ("1", "true", "yes")
    uvicorn.run(
        "solsignal.api.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=reload,
        log_level=config.server.log_level,
    )


if __name__ == "__main__":
    main()
