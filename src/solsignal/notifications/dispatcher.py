"""Fan-out dispatcher — one activity batch to every subscribed destination.

Each (event, alert) pair is an independent task. A delivery failure is
recorded and counted but never cancels sibling tasks or aborts the batch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from solsignal.engine.models.sent_alert import DeliveryStatus, SentAlert
from solsignal.errors.alert_errors import MalformedEvent
from solsignal.notifications.events import DispatchSummary
from solsignal.notifications.formatting import build_template_model, shorten_address

if TYPE_CHECKING:
    from collections.abc import Sequence

    from solsignal.config.settings import SiteConfig
    from solsignal.engine.models.alert import Alert
    from solsignal.engine.store import SubscriptionStore
    from solsignal.metrics.collector import AlertMetrics
    from solsignal.notifications.events import ActivityEvent
    from solsignal.notifications.transport import NotificationTransport

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 10


class FanOutDispatcher:
    """Resolves subscribers per affected address and sends one alert each.

    Usage::

        dispatcher = FanOutDispatcher(store, transport, site, template_alias="...")
        summary = await dispatcher.dispatch(events)
    """

    def __init__(
        self,
        store: SubscriptionStore,
        transport: NotificationTransport,
        site: SiteConfig,
        *,
        template_alias: str,
        metrics: AlertMetrics | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self._store = store
        self._transport = transport
        self._site = site
        self._template_alias = template_alias
        self._metrics = metrics
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def dispatch(self, batch: Sequence[ActivityEvent]) -> DispatchSummary:
        """Notify every alert watching an address touched by *batch*.

        Raises:
            MalformedEvent: If any event has no address. Checked before any
                query or send, so a malformed batch has no side effects.
        """
        for event in batch:
            if not event.address:
                raise MalformedEvent("activity event has no affected address")

        if self._metrics is not None:
            with self._metrics.track_dispatch():
                outcomes = await self._dispatch_all(batch)
        else:
            outcomes = await self._dispatch_all(batch)

        summary = DispatchSummary(
            success_count=sum(1 for o in outcomes if o is DeliveryStatus.SUCCESS),
            fail_count=sum(1 for o in outcomes if o is DeliveryStatus.FAIL),
        )
        logger.info(
            "Alerts sent. Success count: %d, failed count: %d",
            summary.success_count,
            summary.fail_count,
        )
        return summary

    async def _dispatch_all(self, batch: Sequence[ActivityEvent]) -> list[DeliveryStatus]:
        pairs: list[tuple[ActivityEvent, Alert]] = []
        for event in batch:
            alerts = await self._store.find_by_wallet_address(event.address)
            logger.info(
                "Received activity for wallet %s, alerts found: %d",
                shorten_address(event.address),
                len(alerts),
            )
            pairs.extend((event, alert) for alert in alerts)

        if not pairs:
            return []

        tasks = [asyncio.create_task(self._notify(event, alert)) for event, alert in pairs]

        results = await asyncio.gather(*tasks, return_exceptions=True)
        outcomes: list[DeliveryStatus] = []
        errors: list[BaseException] = []
        for result in results:
            if isinstance(result, BaseException):
                errors.append(result)
            else:
                outcomes.append(result)
        if errors:
            # Only store failures reach here; delivery failures are outcomes.
            logger.error("%d alert task(s) failed outside delivery", len(errors))
            raise errors[0]
        return outcomes

    async def _notify(self, event: ActivityEvent, alert: Alert) -> DeliveryStatus:
        """Send one alert and append its delivery record."""
        snapshot = alert.to_dict()
        model = build_template_model(
            self._site,
            alert_id=alert.id,
            wallet_address=event.address,
            email=alert.email,
            description=event.description,
        )

        error: str | None = None
        async with self._semaphore:
            try:
                await self._transport.send_templated(alert.email, self._template_alias, model)
                status = DeliveryStatus.SUCCESS
            except Exception as exc:  # noqa: BLE001 - any send error is local to this recipient
                logger.warning("Failed to send alert %s to %s: %s", alert.id, alert.email, exc)
                status = DeliveryStatus.FAIL
                error = str(exc)

        await self._store.append_sent_alert(SentAlert.from_alert(snapshot, status, error=error))
        if self._metrics is not None:
            self._metrics.record_delivery(status.value)
        return status

