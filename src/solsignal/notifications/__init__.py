"""Notifications — activity events and alert email fan-out.

Provides:
- ``ActivityEvent`` / ``parse_activity_batch`` — ingress batch model
- ``FanOutDispatcher`` — one alert per subscribed destination
- ``PostmarkTransport`` — templated email delivery
"""

from __future__ import annotations

from solsignal.notifications.dispatcher import FanOutDispatcher
from solsignal.notifications.events import ActivityEvent, DispatchSummary, parse_activity_batch
from solsignal.notifications.transport import NotificationTransport, PostmarkTransport

__all__ = [
    "ActivityEvent",
    "DispatchSummary",
    "FanOutDispatcher",
    "NotificationTransport",
    "PostmarkTransport",
    "parse_activity_batch",
]
