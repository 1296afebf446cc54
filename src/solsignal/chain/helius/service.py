"""Helius webhook client — the activity-feed registry.

Edits the address list of an existing Helius webhook:
- GET /v0/webhooks/{id} — fetch the current webhook
- PUT /v0/webhooks/{id} — write back the edited ``accountAddresses``

The edit is read-modify-write with no lock or version check. Two concurrent
edits of the same webhook can each write back the list they read, so one
appended address can be lost (and a removed one can reappear) until the next
edit of that address.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import httpx

from solsignal.chain.helius.models import MAX_WEBHOOK_ADDRESSES, HeliusWebhook
from solsignal.errors.alert_errors import RegistryLinkFailure

if TYPE_CHECKING:
    from solsignal.config.settings import HeliusConfig

logger = logging.getLogger(__name__)


class ActivityFeedRegistry(Protocol):
    """Named address lists the monitoring feed calls back on."""

    async def append_addresses(self, webhook_id: str, addresses: list[str]) -> None: ...

    async def remove_addresses(self, webhook_id: str, addresses: list[str]) -> None: ...


class HeliusService:
    """Async client for the Helius webhook API.

    Usage::

        helius = HeliusService(config, api_key, client)
        await helius.append_addresses(config.webhook_id, ["Addr..."])
    """

    def __init__(self, config: HeliusConfig, api_key: str, client: httpx.AsyncClient) -> None:
        self._config = config
        self._api_key = api_key
        self._client = client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_webhook(self, webhook_id: str) -> HeliusWebhook:
        """Fetch a webhook by id.

        Raises:
            RegistryLinkFailure: On HTTP or API errors.
        """
        try:
            response = await self._client.get(self._url(webhook_id), params=self._params())
        except httpx.HTTPError as exc:
            raise RegistryLinkFailure(f"Helius get webhook failed: {exc}") from exc
        self._raise_for_status(response, "get webhook")
        return HeliusWebhook.from_dict(response.json())

    async def append_addresses(self, webhook_id: str, addresses: list[str]) -> None:
        """Add *addresses* to the webhook's watched list."""
        webhook = await self.get_webhook(webhook_id)
        updated = webhook.with_addresses_added(addresses)
        if len(updated.account_addresses) > MAX_WEBHOOK_ADDRESSES:
            msg = f"webhook {webhook_id} would exceed {MAX_WEBHOOK_ADDRESSES} addresses"
            raise RegistryLinkFailure(msg, status_code=422)
        await self._edit_webhook(webhook_id, updated)

    async def remove_addresses(self, webhook_id: str, addresses: list[str]) -> None:
        """Remove *addresses* from the webhook's watched list."""
        webhook = await self.get_webhook(webhook_id)
        await self._edit_webhook(webhook_id, webhook.with_addresses_removed(addresses))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _edit_webhook(self, webhook_id: str, webhook: HeliusWebhook) -> None:
        try:
            response = await self._client.put(
                self._url(webhook_id),
                params=self._params(),
                json=webhook.to_edit_request(),
            )
        except httpx.HTTPError as exc:
            raise RegistryLinkFailure(f"Helius edit webhook failed: {exc}") from exc
        self._raise_for_status(response, "edit webhook")
        logger.debug(
            "Helius webhook %s now watches %d addresses",
            webhook_id,
            len(webhook.account_addresses),
        )

    def _url(self, webhook_id: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/v0/webhooks/{webhook_id}"

    def _params(self) -> dict[str, str]:
        return {"api-key": self._api_key}

    def _raise_for_status(self, response: httpx.Response, operation: str) -> None:
        """Raise a RegistryLinkFailure from a non-2xx response."""
        status = response.status_code
        if status < 400:
            return
        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("error", response.text) if isinstance(body, dict) else response.text
        error_map = {
            401: "Helius authentication failed",
            404: "Helius webhook not found",
            429: "Helius rate limit exceeded",
        }
        message = error_map.get(status, f"Helius {operation} failed ({status}): {detail}")
        raise RegistryLinkFailure(message, status_code=502)
