"""Tests for alert email formatting helpers."""

from __future__ import annotations

import pytest

from solsignal.config.settings import SiteConfig
from solsignal.notifications.formatting import (
    alert_url,
    build_template_model,
    login_url,
    shorten_address,
)

_ADDRESS = "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin"


class TestShortenAddress:
    def test_prefix_ellipsis_suffix(self) -> None:
        assert shorten_address(_ADDRESS) == "9xQe...VFin"

    def test_deterministic(self) -> None:
        assert shorten_address(_ADDRESS) == shorten_address(_ADDRESS)

    def test_input_not_altered(self) -> None:
        address = str(_ADDRESS)
        shorten_address(address)
        assert address == _ADDRESS

    @pytest.mark.parametrize("short", ["", "abc", "12345678"])
    def test_short_strings_unchanged(self, short: str) -> None:
        assert shorten_address(short) == short

    def test_custom_lengths(self) -> None:
        assert shorten_address("abcdefghijkl", prefix=2, suffix=3) == "ab...jkl"

    def test_case_preserved(self) -> None:
        assert shorten_address("AbCdEfGhIjKl") == "AbCd...IjKl"


class TestLinks:
    def test_alert_url(self) -> None:
        site = SiteConfig(app_url="https://solsignal.xyz/")
        assert alert_url(site, "abc123") == "https://solsignal.xyz/alerts/abc123"

    def test_login_url(self) -> None:
        assert login_url(SiteConfig()) == "https://solsignal.xyz/login"


def test_build_template_model() -> None:
    model = build_template_model(
        SiteConfig(),
        alert_id="alert-1",
        wallet_address=_ADDRESS,
        email="a@x.com",
        description="swap 1 SOL for 150 USDC",
    )
    assert model == {
        "shortenedWalletAddress": "9xQe...VFin",
        "walletAddress": _ADDRESS,
        "txDescription": "swap 1 SOL for 150 USDC",
        "alertUrl": "https://solsignal.xyz/alerts/alert-1",
        "loginUrl": "https://solsignal.xyz/login",
        "email": "a@x.com",
        "supportEmail": "info@solsignal.xyz",
    }
