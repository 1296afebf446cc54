"""Shared-secret authentication for the activity-feed ingress.

Helius echoes the webhook's ``authHeader`` value in the ``Authorization``
header of every delivery. The value must match the configured secret
exactly; it is compared in constant time.
"""

from __future__ import annotations

import hmac
import logging

from solsignal.config.settings import IngressConfig, require_secret
from solsignal.errors.definitions import ErrUnauthorized

logger = logging.getLogger(__name__)


def verify_shared_secret(config: IngressConfig, supplied: str | None) -> None:
    """Check *supplied* against the configured ingress secret.

    Raises:
        ConfigurationError: If no ingress secret is configured.
        Unauthorized: If *supplied* is missing or does not match.
    """
    expected = require_secret(config.auth_header, "Ingress auth header")
    if not supplied or not hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        logger.error(
            "Unauthorized ingress request (header %s present: %s)",
            config.header_name,
            bool(supplied),
        )
        raise ErrUnauthorized
