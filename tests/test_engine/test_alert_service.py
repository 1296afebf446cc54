"""Tests for the alert lifecycle service."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from solsignal.errors.alert_errors import ConfigurationError, RegistryLinkFailure

if TYPE_CHECKING:
    from solsignal.engine.client import AlertEngine


async def _system_count(engine: AlertEngine) -> int:
    config = await engine.store.get_system_config()
    assert config is not None
    return config.system_alert_count


class TestCreateAlert:
    async def test_create_links_and_counts(self, engine: AlertEngine, fake_registry) -> None:
        alert = await engine.alert_service.create_alert("Addr1", "a@x.com", metadata={"k": "v"})

        assert alert.webhook_id == "wh-test"
        assert alert.metadata_ == {"k": "v"}
        assert fake_registry.lists["wh-test"] == ["Addr1"]
        assert await _system_count(engine) == await engine.store.count_alerts() == 1

    async def test_registry_failure_surfaces(self, engine: AlertEngine, fake_registry) -> None:
        fake_registry.fail = True

        with pytest.raises(RegistryLinkFailure):
            await engine.alert_service.create_alert("Addr1", "a@x.com")

        [alert] = await engine.alert_service.list_alerts_for_address("Addr1")
        assert alert.webhook_id is None
        assert await _system_count(engine) == await engine.store.count_alerts() == 1

    @pytest.mark.parametrize(("address", "email"), [("", "a@x.com"), ("Addr1", "")])
    async def test_requires_fields(self, engine: AlertEngine, address: str, email: str) -> None:
        with pytest.raises(ValueError):
            await engine.alert_service.create_alert(address, email)
        assert await engine.store.count_alerts() == 0


class TestDeleteAlert:
    async def test_delete_unlinks_and_counts(self, engine: AlertEngine, fake_registry) -> None:
        keep = await engine.alert_service.create_alert("Addr2", "b@x.com")
        gone = await engine.alert_service.create_alert("Addr1", "a@x.com")

        assert await engine.alert_service.delete_alert(gone.id) is True

        assert fake_registry.lists["wh-test"] == ["Addr2"]
        assert await engine.alert_service.get_alert(keep.id) is not None
        assert await _system_count(engine) == await engine.store.count_alerts() == 1

    async def test_delete_missing_fires_nothing(self, engine: AlertEngine, fake_registry) -> None:
        assert await engine.alert_service.delete_alert("nope") is False
        assert fake_registry.calls == []


async def test_list_sent_alerts(engine: AlertEngine) -> None:
    from solsignal.notifications.events import ActivityEvent

    alert = await engine.alert_service.create_alert("Addr1", "a@x.com")
    await engine.dispatcher().dispatch([ActivityEvent(address="Addr1", description="swap")])

    [record] = await engine.alert_service.list_sent_alerts(alert.id)
    assert record.webhook_id == "wh-test"


async def test_refresh_alert_count(engine: AlertEngine) -> None:
    await engine.alert_service.create_alert("Addr1", "a@x.com")
    assert await engine.alert_service.refresh_alert_count() == 1


async def test_missing_registry_key_aborts_before_persisting(app_config) -> None:
    from solsignal.engine.client import AlertEngine

    app_config.helius.api_key = ""
    eng = AlertEngine(app_config)
    await eng.initialize()
    try:
        with pytest.raises(ConfigurationError, match="Helius API key"):
            await eng.alert_service.create_alert("Addr1", "a@x.com")
        assert await eng.store.count_alerts() == 0
    finally:
        await eng.close()
