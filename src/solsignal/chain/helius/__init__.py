"""Helius — webhook address-list registry."""

from solsignal.chain.helius.models import HeliusWebhook
from solsignal.chain.helius.service import ActivityFeedRegistry, HeliusService

__all__ = ["ActivityFeedRegistry", "HeliusService", "HeliusWebhook"]
