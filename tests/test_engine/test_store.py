"""Tests for the SQLite-backed subscription store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from solsignal.datastore.migrations import drop_all_tables, run_auto_migrate
from solsignal.engine.models import SYSTEM_CONFIG_ID, Alert, DeliveryStatus, SentAlert

if TYPE_CHECKING:
    from solsignal.engine.client import AlertEngine


class TestAlerts:
    async def test_add_assigns_id_and_timestamps(self, engine: AlertEngine) -> None:
        alert = await engine.store.add_alert(Alert(wallet_address="Addr1", email="a@x.com"))
        assert alert.id
        assert alert.created_at is not None
        assert alert.webhook_id is None
        assert alert.metadata_ == {}

    async def test_find_is_exact(self, engine: AlertEngine) -> None:
        await engine.store.add_alert(Alert(wallet_address="Addr1", email="a@x.com"))
        await engine.store.add_alert(Alert(wallet_address="ADDR1", email="b@x.com"))
        await engine.store.add_alert(Alert(wallet_address="Addr1 ", email="c@x.com"))

        found = await engine.store.find_by_wallet_address("Addr1")

        assert [a.email for a in found] == ["a@x.com"]

    async def test_counts(self, engine: AlertEngine) -> None:
        for address in ("Addr1", "Addr1", "Addr2"):
            await engine.store.add_alert(Alert(wallet_address=address, email="a@x.com"))
        assert await engine.store.count_alerts() == 3
        assert await engine.store.count_by_wallet_address("Addr1") == 2
        assert await engine.store.count_by_wallet_address("Nope") == 0

    async def test_merge_update_keeps_other_fields(self, engine: AlertEngine) -> None:
        alert = await engine.store.add_alert(
            Alert(wallet_address="Addr1", email="a@x.com", metadata_={"source": "web"})
        )

        updated = await engine.store.merge_update_alert(alert.id, {"webhook_id": "wh-1"})

        assert updated is not None
        assert updated.webhook_id == "wh-1"
        assert updated.email == "a@x.com"
        assert updated.metadata_ == {"source": "web"}

    async def test_merge_update_missing(self, engine: AlertEngine) -> None:
        assert await engine.store.merge_update_alert("nope", {"webhook_id": "wh-1"}) is None

    async def test_merge_update_rejects_immutable_fields(self, engine: AlertEngine) -> None:
        alert = await engine.store.add_alert(Alert(wallet_address="Addr1", email="a@x.com"))
        with pytest.raises(ValueError, match="wallet_address"):
            await engine.store.merge_update_alert(alert.id, {"wallet_address": "Addr2"})

    async def test_delete_returns_snapshot(self, engine: AlertEngine) -> None:
        alert = await engine.store.add_alert(
            Alert(wallet_address="Addr1", email="a@x.com", webhook_id="wh-1")
        )

        snapshot = await engine.store.delete_alert(alert.id)

        assert snapshot is not None
        assert snapshot["id"] == alert.id
        assert snapshot["wallet_address"] == "Addr1"
        assert snapshot["webhook_id"] == "wh-1"
        assert await engine.store.get_alert(alert.id) is None
        assert await engine.store.delete_alert(alert.id) is None


class TestSentAlerts:
    async def test_append_and_list(self, engine: AlertEngine) -> None:
        alert = await engine.store.add_alert(Alert(wallet_address="Addr1", email="a@x.com"))
        snapshot = alert.to_dict()

        await engine.store.append_sent_alert(SentAlert.from_alert(snapshot, DeliveryStatus.SUCCESS))
        await engine.store.append_sent_alert(
            SentAlert.from_alert(snapshot, DeliveryStatus.FAIL, error="bounced")
        )
        await engine.store.append_sent_alert(
            SentAlert.from_alert({**snapshot, "id": "other"}, DeliveryStatus.SUCCESS)
        )

        records = await engine.store.list_sent_alerts(alert_id=alert.id)
        assert [r.status for r in records] == [DeliveryStatus.SUCCESS, DeliveryStatus.FAIL]
        assert records[1].error == "bounced"
        assert records[0].snapshot["email"] == "a@x.com"
        assert records[0].created_at > 0
        assert len(await engine.store.list_sent_alerts()) == 3


class TestSystemConfig:
    async def test_overwrite(self, engine: AlertEngine) -> None:
        assert await engine.store.get_system_config() is None

        await engine.store.set_system_alert_count(5)
        await engine.store.set_system_alert_count(3)

        config = await engine.store.get_system_config()
        assert config is not None
        assert config.id == SYSTEM_CONFIG_ID
        assert config.system_alert_count == 3


async def test_migrations_idempotent(engine: AlertEngine) -> None:
    await engine.store.add_alert(Alert(wallet_address="Addr1", email="a@x.com"))
    await run_auto_migrate(engine.datastore.engine)
    assert await engine.store.count_alerts() == 1

    await drop_all_tables(engine.datastore.engine)
    await run_auto_migrate(engine.datastore.engine)
    assert await engine.store.count_alerts() == 0
