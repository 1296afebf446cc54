"""Registry sync — alert lifecycle to activity-feed membership."""

from solsignal.registry.synchronizer import RegistrySynchronizer

__all__ = ["RegistrySynchronizer"]
