"""Registry synchronizer — keeps the Helius address list and the aggregate
count in step with alert creation and deletion.

The registry is keyed by address while alerts are keyed by id, so several
alerts may share one registry entry. On deletion the address is only removed
once no live alert references it (unless ``keep_shared_addresses`` is off).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from solsignal.errors.alert_errors import RegistryLinkFailure
from solsignal.notifications.formatting import shorten_address

if TYPE_CHECKING:
    from solsignal.chain.helius.service import ActivityFeedRegistry
    from solsignal.engine.models.alert import Alert
    from solsignal.engine.store import SubscriptionStore
    from solsignal.metrics.collector import AlertMetrics

logger = logging.getLogger(__name__)


class RegistrySynchronizer:
    """Reacts to alert lifecycle events.

    Args:
        store: Subscription store holding the alerts and the aggregate.
        registry: Activity-feed registry client.
        webhook_id: The registry list every alert address belongs to.
        keep_shared_addresses: Skip registry removal while other alerts
            still watch the deleted alert's address.
        metrics: Optional metrics sink.
    """

    def __init__(
        self,
        store: SubscriptionStore,
        registry: ActivityFeedRegistry,
        webhook_id: str,
        *,
        keep_shared_addresses: bool = True,
        metrics: AlertMetrics | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._webhook_id = webhook_id
        self._keep_shared = keep_shared_addresses
        self._metrics = metrics

    @property
    def webhook_id(self) -> str:
        return self._webhook_id

    async def on_subscription_created(self, alert: Alert) -> Alert:
        """Append the alert's address to the registry and link the record.

        Returns the alert with ``webhook_id`` set.

        Raises:
            RegistryLinkFailure: If the registry call fails. The alert is left
                without a ``webhook_id``.
        """
        address = alert.wallet_address
        await self._call_registry("append", self._registry.append_addresses, address)
        logger.info(
            "Address %s appended to webhook with ID %s", shorten_address(address), self._webhook_id
        )

        await self.refresh_alert_count()

        linked = await self._store.merge_update_alert(alert.id, {"webhook_id": self._webhook_id})
        if linked is None:
            # Deleted between the append and the link; its delete trigger handles cleanup.
            logger.warning("Alert %s vanished before registry linkage was written", alert.id)
            alert.webhook_id = self._webhook_id
            return alert
        return linked

    async def on_subscription_deleted(self, snapshot: dict[str, Any]) -> bool:
        """Remove a deleted alert's address from the registry.

        *snapshot* is the alert's last-known state (see ``Alert.to_dict``).
        Returns True if the registry was called, False if the address is
        still watched by other alerts.

        Raises:
            RegistryLinkFailure: If the registry call fails.
        """
        address = snapshot["wallet_address"]
        if snapshot.get("webhook_id") not in (None, self._webhook_id):
            logger.warning(
                "Alert %s was linked to webhook %s, removing from %s",
                snapshot.get("id"),
                snapshot["webhook_id"],
                self._webhook_id,
            )

        removed = True
        siblings = 0
        if self._keep_shared:
            siblings = await self._store.count_by_wallet_address(address)
        if siblings:
            removed = False
            logger.info(
                "Address %s still watched by %d alert(s), keeping it on webhook %s",
                shorten_address(address),
                siblings,
                self._webhook_id,
            )
        else:
            await self._call_registry("remove", self._registry.remove_addresses, address)
            logger.info(
                "Address %s removed from webhook with ID %s",
                shorten_address(address),
                self._webhook_id,
            )

        await self.refresh_alert_count()
        return removed

    async def refresh_alert_count(self) -> int:
        """Overwrite the aggregate with a fresh authoritative count."""
        count = await self._store.count_alerts()
        await self._store.set_system_alert_count(count)
        if self._metrics is not None:
            self._metrics.set_live_alerts(count)
        logger.info("System alert count updated to %d", count)
        return count

    async def _call_registry(self, operation: str, call: Any, address: str) -> None:
        try:
            await call(self._webhook_id, [address])
        except Exception as exc:
            self._record(operation, "fail")
            logger.exception(
                "Registry %s failed for %s on webhook %s",
                operation,
                shorten_address(address),
                self._webhook_id,
            )
            if isinstance(exc, RegistryLinkFailure):
                raise
            msg = f"registry {operation} failed: {exc}"
            raise RegistryLinkFailure(msg) from exc
        self._record(operation, "success")

    def _record(self, operation: str, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_registry_sync(operation, outcome)
