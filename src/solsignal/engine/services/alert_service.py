"""Alert service — alert lifecycle and its registry triggers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from solsignal.engine.models.alert import Alert
from solsignal.errors.alert_errors import RegistryLinkFailure
from solsignal.notifications.formatting import shorten_address

if TYPE_CHECKING:
    from solsignal.engine.client import AlertEngine
    from solsignal.engine.models.sent_alert import SentAlert

logger = logging.getLogger(__name__)


class AlertService:
    """Creates and deletes alerts and fires the registry sync for each.

    The registration flow calls this service; there is no public HTTP
    surface for it.
    """

    def __init__(self, engine: AlertEngine) -> None:
        self._engine = engine

    async def create_alert(
        self,
        wallet_address: str,
        email: str,
        *,
        metadata: dict[str, Any] | None = None,
    ) -> Alert:
        """Persist an alert, then link its address in the registry.

        Raises:
            ValueError: If the wallet address or email is empty.
            ConfigurationError: If the registry API key is missing.
            RegistryLinkFailure: If the registry append fails. The alert stays
                persisted without ``webhook_id`` and the aggregate count still
                includes it.
        """
        if not wallet_address or not email:
            msg = "wallet address and email are required"
            raise ValueError(msg)

        synchronizer = self._engine.synchronizer()
        alert = Alert(wallet_address=wallet_address, email=email, metadata_=metadata or {})
        alert = await self._engine.store.add_alert(alert)
        logger.info(
            "Alert %s created for wallet %s", alert.id, shorten_address(alert.wallet_address)
        )
        try:
            return await synchronizer.on_subscription_created(alert)
        except RegistryLinkFailure:
            await synchronizer.refresh_alert_count()
            raise

    async def delete_alert(self, alert_id: str) -> bool:
        """Delete an alert, then unlink its address from the registry.

        Returns False (and fires nothing) if the alert does not exist.

        Raises:
            ConfigurationError: If the registry API key is missing.
            RegistryLinkFailure: If the registry removal fails.
        """
        synchronizer = self._engine.synchronizer()
        snapshot = await self._engine.store.delete_alert(alert_id)
        if snapshot is None:
            return False
        logger.info("Alert %s deleted", alert_id)
        await synchronizer.on_subscription_deleted(snapshot)
        return True

    async def get_alert(self, alert_id: str) -> Alert | None:
        return await self._engine.store.get_alert(alert_id)

    async def list_alerts_for_address(self, wallet_address: str) -> list[Alert]:
        return await self._engine.store.find_by_wallet_address(wallet_address)

    async def list_sent_alerts(self, alert_id: str) -> list[SentAlert]:
        """Delivery history of one alert, oldest first."""
        return await self._engine.store.list_sent_alerts(alert_id=alert_id)

    async def refresh_alert_count(self) -> int:
        """Recompute the aggregate count without a lifecycle event."""
        return await self._engine.synchronizer().refresh_alert_count()
