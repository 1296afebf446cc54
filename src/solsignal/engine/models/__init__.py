"""Subscription store data models (SQLAlchemy ORM).

Import :data:`ALL_MODELS` for migration and table creation.
"""

from solsignal.engine.models.alert import Alert
from solsignal.engine.models.base import Base, MetadataMixin, TimestampMixin
from solsignal.engine.models.sent_alert import DeliveryStatus, SentAlert
from solsignal.engine.models.system_config import SYSTEM_CONFIG_ID, SystemConfig

ALL_MODELS: list[type[Base]] = [
    Alert,
    SentAlert,
    SystemConfig,
]

__all__ = [
    "ALL_MODELS",
    "SYSTEM_CONFIG_ID",
    "Alert",
    "Base",
    "DeliveryStatus",
    "MetadataMixin",
    "SentAlert",
    "SystemConfig",
    "TimestampMixin",
]
