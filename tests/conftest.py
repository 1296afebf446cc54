"""Shared test fixtures for the solsignal test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from solsignal.config.settings import (
    AppConfig,
    DatabaseConfig,
    HeliusConfig,
    IngressConfig,
    PostmarkConfig,
)
from solsignal.errors.alert_errors import DeliveryFailure, RegistryLinkFailure

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    from solsignal.engine.client import AlertEngine

TEST_SECRET = "test-ingress-secret"  # noqa: S105
TEST_WEBHOOK_ID = "wh-test"


class FakeTransport:
    """In-memory notification transport; fails for destinations in ``failing``."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict[str, Any]]] = []
        self.failing: set[str] = set()

    async def send_templated(
        self,
        destination: str,
        template_alias: str,
        template_model: dict[str, Any],
    ) -> str:
        if destination in self.failing:
            raise DeliveryFailure(f"mailbox unavailable: {destination}")
        self.sent.append((destination, template_alias, template_model))
        return f"msg-{len(self.sent)}"


class FakeRegistry:
    """In-memory activity-feed registry keyed by webhook id."""

    def __init__(self) -> None:
        self.lists: dict[str, list[str]] = {}
        self.calls: list[tuple[str, str, list[str]]] = []
        self.fail = False

    async def append_addresses(self, webhook_id: str, addresses: list[str]) -> None:
        self.calls.append(("append", webhook_id, list(addresses)))
        if self.fail:
            raise RegistryLinkFailure("registry unavailable")
        members = self.lists.setdefault(webhook_id, [])
        members.extend(a for a in addresses if a not in members)

    async def remove_addresses(self, webhook_id: str, addresses: list[str]) -> None:
        self.calls.append(("remove", webhook_id, list(addresses)))
        if self.fail:
            raise RegistryLinkFailure("registry unavailable")
        members = self.lists.setdefault(webhook_id, [])
        self.lists[webhook_id] = [a for a in members if a not in addresses]


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Provide a test AppConfig with every secret set and a throwaway SQLite file."""
    return AppConfig(
        debug=True,
        db=DatabaseConfig(dsn=f"sqlite+aiosqlite:///{tmp_path / 'solsignal.db'}"),
        postmark=PostmarkConfig(api_key="pm-test-key"),
        helius=HeliusConfig(api_key="helius-test-key", webhook_id=TEST_WEBHOOK_ID),
        ingress=IngressConfig(auth_header=TEST_SECRET),
    )


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
async def engine(
    app_config: AppConfig,
    fake_transport: FakeTransport,
    fake_registry: FakeRegistry,
) -> AsyncIterator[AlertEngine]:
    """An initialized engine wired to the in-memory transport and registry."""
    from solsignal.engine.client import AlertEngine

    eng = AlertEngine(app_config, transport=fake_transport, registry=fake_registry)
    await eng.initialize()
    yield eng
    await eng.close()
