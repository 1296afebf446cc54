"""Chain integrations — Solana activity feed providers."""

from solsignal.chain.helius import ActivityFeedRegistry, HeliusService

__all__ = ["ActivityFeedRegistry", "HeliusService"]
