"""Display helpers for alert emails."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from solsignal.config.settings import SiteConfig

ELLIPSIS = "..."
_PREFIX_LEN = 4
_SUFFIX_LEN = 4


def shorten_address(address: str, *, prefix: int = _PREFIX_LEN, suffix: int = _SUFFIX_LEN) -> str:
    """Return ``"ABCD...WXYZ"`` for display. Never use the result as a key.

    Strings too short to shorten are returned as-is.
    """
    if len(address) <= prefix + suffix:
        return address
    return f"{address[:prefix]}{ELLIPSIS}{address[-suffix:]}"


def alert_url(site: SiteConfig, alert_id: str) -> str:
    return f"{site.app_url.rstrip('/')}/alerts/{alert_id}"


def login_url(site: SiteConfig) -> str:
    return f"{site.app_url.rstrip('/')}/login"


def build_template_model(
    site: SiteConfig,
    *,
    alert_id: str,
    wallet_address: str,
    email: str,
    description: str,
) -> dict[str, Any]:
    """Template fields for the transaction alert email."""
    return {
        "shortenedWalletAddress": shorten_address(wallet_address),
        "walletAddress": wallet_address,
        "txDescription": description,
        "alertUrl": alert_url(site, alert_id),
        "loginUrl": login_url(site),
        "email": email,
        "supportEmail": site.support_email,
    }
