"""Subscription store — data access for alerts, sent alerts and the aggregate.

Every method opens its own short-lived session so that concurrent fan-out
tasks never share one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select

from solsignal.engine.models.alert import Alert
from solsignal.engine.models.sent_alert import SentAlert
from solsignal.engine.models.system_config import SYSTEM_CONFIG_ID, SystemConfig

if TYPE_CHECKING:
    from solsignal.datastore.client import Datastore

# Fields a merge-update may touch; the id and wallet address are immutable.
_MERGEABLE_FIELDS = frozenset({"email", "webhook_id", "metadata_"})


class SubscriptionStore:
    """Collection-style access to the ``alerts``, ``sent_alerts`` and ``config`` tables."""

    def __init__(self, datastore: Datastore) -> None:
        self._ds = datastore

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    async def add_alert(self, alert: Alert) -> Alert:
        """Persist a new alert."""
        async with self._ds.session() as session:
            session.add(alert)
            await session.commit()
            await session.refresh(alert)
        return alert

    async def get_alert(self, alert_id: str) -> Alert | None:
        async with self._ds.session() as session:
            return await session.get(Alert, alert_id)

    async def find_by_wallet_address(self, wallet_address: str) -> list[Alert]:
        """All alerts whose wallet address equals *wallet_address* exactly."""
        async with self._ds.session() as session:
            stmt = (
                select(Alert)
                .where(Alert.wallet_address == wallet_address)
                .order_by(Alert.created_at)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count_alerts(self) -> int:
        """Authoritative count of live alerts."""
        async with self._ds.session() as session:
            result = await session.execute(select(func.count()).select_from(Alert))
            return int(result.scalar_one())

    async def count_by_wallet_address(self, wallet_address: str) -> int:
        async with self._ds.session() as session:
            stmt = (
                select(func.count())
                .select_from(Alert)
                .where(Alert.wallet_address == wallet_address)
            )
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def merge_update_alert(self, alert_id: str, fields: dict[str, Any]) -> Alert | None:
        """Set *fields* on an existing alert, leaving the others untouched.

        Returns the updated alert, or None when it no longer exists.

        Raises:
            ValueError: If *fields* names a column that may not be merged.
        """
        unknown = set(fields) - _MERGEABLE_FIELDS
        if unknown:
            msg = f"cannot merge-update alert fields: {sorted(unknown)}"
            raise ValueError(msg)
        async with self._ds.session() as session:
            alert = await session.get(Alert, alert_id)
            if alert is None:
                return None
            for key, value in fields.items():
                setattr(alert, key, value)
            await session.commit()
            await session.refresh(alert)
            return alert

    async def delete_alert(self, alert_id: str) -> dict[str, Any] | None:
        """Delete an alert and return its last-known snapshot (None if missing)."""
        async with self._ds.session() as session:
            alert = await session.get(Alert, alert_id)
            if alert is None:
                return None
            snapshot = alert.to_dict()
            await session.delete(alert)
            await session.commit()
            return snapshot

    # ------------------------------------------------------------------
    # Sent alerts
    # ------------------------------------------------------------------

    async def append_sent_alert(self, record: SentAlert) -> SentAlert:
        """Insert a delivery record. Records are never updated afterwards."""
        async with self._ds.session() as session:
            session.add(record)
            await session.commit()
            await session.refresh(record)
        return record

    async def list_sent_alerts(self, *, alert_id: str | None = None) -> list[SentAlert]:
        async with self._ds.session() as session:
            stmt = select(SentAlert).order_by(SentAlert.id)
            if alert_id is not None:
                stmt = stmt.where(SentAlert.alert_id == alert_id)
            result = await session.execute(stmt)
            return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Aggregate
    # ------------------------------------------------------------------

    async def set_system_alert_count(self, count: int) -> None:
        """Overwrite the cached live alert count."""
        async with self._ds.session() as session:
            config = await session.get(SystemConfig, SYSTEM_CONFIG_ID)
            if config is None:
                session.add(SystemConfig(id=SYSTEM_CONFIG_ID, system_alert_count=count))
            else:
                config.system_alert_count = count
            await session.commit()

    async def get_system_config(self) -> SystemConfig | None:
        async with self._ds.session() as session:
            return await session.get(SystemConfig, SYSTEM_CONFIG_ID)
