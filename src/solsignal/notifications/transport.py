"""Notification transport — Postmark templated email over httpx.

Provides:
- ``NotificationTransport`` — the protocol the dispatcher depends on
- ``PostmarkTransport`` — ``POST /email/withTemplate`` client
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from solsignal.errors.alert_errors import DeliveryFailure

if TYPE_CHECKING:
    from solsignal.config.settings import PostmarkConfig

logger = logging.getLogger(__name__)

_TOKEN_HEADER = "X-Postmark-Server-Token"  # noqa: S105


class NotificationTransport(Protocol):
    """Delivers one templated message to one destination."""

    async def send_templated(
        self,
        destination: str,
        template_alias: str,
        template_model: dict[str, Any],
    ) -> str:
        """Send the message and return the provider's message id.

        Raises:
            DeliveryFailure: If the message could not be accepted.
        """
        ...


class PostmarkTransport:
    """Postmark API client sending templated alert emails.

    The ``httpx.AsyncClient`` is owned by the caller and shared across
    invocations.
    """

    def __init__(self, config: PostmarkConfig, api_key: str, client: httpx.AsyncClient) -> None:
        self._config = config
        self._api_key = api_key
        self._client = client

    async def send_templated(
        self,
        destination: str,
        template_alias: str,
        template_model: dict[str, Any],
    ) -> str:
        """Send one templated email. See :class:`NotificationTransport`."""
        if not destination or "@" not in destination:
            raise DeliveryFailure(f"invalid destination: {destination!r}")

        payload = {
            "From": self._config.from_address,
            "To": destination,
            "MessageStream": self._config.message_stream,
            "TemplateAlias": template_alias,
            "TemplateModel": template_model,
        }
        headers = {
            "Accept": "application/json",
            _TOKEN_HEADER: self._api_key,
        }
        url = f"{self._config.base_url.rstrip('/')}/email/withTemplate"

        try:
            response = await self._client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise DeliveryFailure(f"Postmark request failed: {exc}") from exc

        body = _json_or_empty(response)
        error_code = body.get("ErrorCode", 0)
        if response.status_code >= 400 or error_code:
            message = body.get("Message") or response.text
            raise DeliveryFailure(
                f"Postmark rejected message (HTTP {response.status_code}, "
                f"ErrorCode {error_code}): {message}"
            )
        message_id = str(body.get("MessageID", ""))
        logger.debug("Postmark accepted message %s", message_id)
        return message_id


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
