"""Helius webhook data models.

Mirrors the Helius ``/v0/webhooks`` resource. Only ``accountAddresses`` is
edited by this service; every other field is echoed back on update.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Helius refuses webhooks watching more addresses than this.
MAX_WEBHOOK_ADDRESSES = 100_000


@dataclass
class HeliusWebhook:
    """A Helius webhook and the addresses it watches.

    Attributes:
        webhook_id: Webhook identifier (the registry list id).
        webhook_url: Callback URL Helius posts activity to.
        transaction_types: Transaction type filter (e.g. ``["ANY"]``).
        account_addresses: Watched wallet addresses.
        webhook_type: ``enhanced``, ``raw``, ``discord`` ...
        auth_header: Value Helius sends in the ``Authorization`` header.
    """

    webhook_id: str = ""
    webhook_url: str = ""
    transaction_types: list[str] = field(default_factory=list)
    account_addresses: list[str] = field(default_factory=list)
    webhook_type: str = ""
    auth_header: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HeliusWebhook:
        """Create a webhook from a Helius JSON response dict."""
        return cls(
            webhook_id=data.get("webhookID", ""),
            webhook_url=data.get("webhookURL", ""),
            transaction_types=list(data.get("transactionTypes", [])),
            account_addresses=list(data.get("accountAddresses", [])),
            webhook_type=data.get("webhookType", ""),
            auth_header=data.get("authHeader", ""),
        )

    def to_edit_request(self) -> dict[str, Any]:
        """Body for ``PUT /v0/webhooks/{id}``."""
        body: dict[str, Any] = {
            "webhookURL": self.webhook_url,
            "transactionTypes": self.transaction_types,
            "accountAddresses": self.account_addresses,
            "webhookType": self.webhook_type,
        }
        if self.auth_header:
            body["authHeader"] = self.auth_header
        return body

    def with_addresses_added(self, addresses: list[str]) -> HeliusWebhook:
        """Copy with *addresses* appended; already-watched ones are not repeated."""
        merged = list(dict.fromkeys([*self.account_addresses, *addresses]))
        return _replace_addresses(self, merged)

    def with_addresses_removed(self, addresses: list[str]) -> HeliusWebhook:
        drop = set(addresses)
        return _replace_addresses(self, [a for a in self.account_addresses if a not in drop])


def _replace_addresses(webhook: HeliusWebhook, addresses: list[str]) -> HeliusWebhook:
    return HeliusWebhook(
        webhook_id=webhook.webhook_id,
        webhook_url=webhook.webhook_url,
        transaction_types=list(webhook.transaction_types),
        account_addresses=addresses,
        webhook_type=webhook.webhook_type,
        auth_header=webhook.auth_header,
    )
