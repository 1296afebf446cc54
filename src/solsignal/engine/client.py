"""AlertEngine — owns the process-wide handles and builds per-invocation workers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from solsignal.config.settings import require_secret
from solsignal.metrics.collector import AlertMetrics

if TYPE_CHECKING:
    from solsignal.chain.helius.service import ActivityFeedRegistry
    from solsignal.config.settings import AppConfig
    from solsignal.datastore.client import Datastore
    from solsignal.engine.services.alert_service import AlertService
    from solsignal.engine.store import SubscriptionStore
    from solsignal.notifications.dispatcher import FanOutDispatcher
    from solsignal.notifications.transport import NotificationTransport
    from solsignal.registry.synchronizer import RegistrySynchronizer

logger = logging.getLogger(__name__)

_ERR_NOT_INITIALIZED = "Engine not initialized. Call initialize() first."


class AlertEngine:
    """Central engine that owns the datastore, HTTP client and metrics.

    The notification transport and the registry client need secrets that are
    only checked when an invocation asks for them, so a missing key fails
    that invocation with ``ConfigurationError`` instead of the whole process.
    Tests may pass ready-made ``transport`` / ``registry`` implementations.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        transport: NotificationTransport | None = None,
        registry: ActivityFeedRegistry | None = None,
        metrics: AlertMetrics | None = None,
    ) -> None:
        self._config = config
        self._initialized = False
        self._transport_override = transport
        self._registry_override = registry

        self._datastore: Datastore | None = None
        self._store: SubscriptionStore | None = None
        self._http: httpx.AsyncClient | None = None
        self._metrics = metrics or AlertMetrics()
        self._alert_service: AlertService | None = None

    async def initialize(self) -> None:
        """Open the datastore and the shared HTTP client.

        Raises:
            RuntimeError: If already initialized.
        """
        if self._initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        from solsignal.datastore.client import Datastore
        from solsignal.engine.services.alert_service import AlertService
        from solsignal.engine.store import SubscriptionStore
        self._datastore = Datastore(self._config.db)
        await self._datastore.open()
        self._store = SubscriptionStore(self._datastore)

        self._http = httpx.AsyncClient(timeout=self._config.dispatch.http_timeout)

        self._alert_service = AlertService(self)
        self._initialized = True
        logger.info("Alert engine initialized")

    async def close(self) -> None:
        """Release connections. Safe to call more than once."""
        if not self._initialized:
            return
        if self._http is not None:
            await self._http.aclose()
            self._http = None
        if self._datastore is not None:
            await self._datastore.close()
            self._datastore = None
        self._store = None
        self._alert_service = None
        self._initialized = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def datastore(self) -> Datastore:
        if self._datastore is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._datastore

    @property
    def store(self) -> SubscriptionStore:
        """Get the subscription store.

        Raises:
            RuntimeError: If engine not initialized.
        """
        if self._store is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._store

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Shared outbound HTTP client."""
        if self._http is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._http

    @property
    def metrics(self) -> AlertMetrics:
        return self._metrics

    @property
    def alert_service(self) -> AlertService:
        """Get the alert lifecycle service."""
        if self._alert_service is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._alert_service

    # ------------------------------------------------------------------
    # Per-invocation workers
    # ------------------------------------------------------------------

    def notification_transport(self) -> NotificationTransport:
        """Return the Postmark transport.

        Raises:
            ConfigurationError: If the Postmark API key is not configured.
        """
        self._ensure_initialized()
        if self._transport_override is not None:
            return self._transport_override

        from solsignal.notifications.transport import PostmarkTransport

        cfg = self._config.postmark
        api_key = require_secret(cfg.api_key, "Postmark API key")
        return PostmarkTransport(cfg, api_key, self.http_client)

    def activity_registry(self) -> ActivityFeedRegistry:
        """Return the Helius registry client.

        Raises:
            ConfigurationError: If the Helius API key is not configured.
        """
        self._ensure_initialized()
        if self._registry_override is not None:
            return self._registry_override

        from solsignal.chain.helius.service import HeliusService

        cfg = self._config.helius
        api_key = require_secret(cfg.api_key, "Helius API key")
        return HeliusService(cfg, api_key, self.http_client)

    def dispatcher(self) -> FanOutDispatcher:
        """Build a dispatcher for one activity batch."""
        from solsignal.notifications.dispatcher import FanOutDispatcher

        return FanOutDispatcher(
            self.store,
            self.notification_transport(),
            self._config.site,
            template_alias=self._config.postmark.template_alias,
            metrics=self.metrics,
            max_concurrency=self._config.dispatch.max_concurrency,
        )

    def synchronizer(self) -> RegistrySynchronizer:
        """Build a synchronizer for one lifecycle event."""
        from solsignal.registry.synchronizer import RegistrySynchronizer

        return RegistrySynchronizer(
            self.store,
            self.activity_registry(),
            self._config.helius.webhook_id,
            keep_shared_addresses=self._config.helius.keep_shared_addresses,
            metrics=self.metrics,
        )

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
