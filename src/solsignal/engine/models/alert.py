"""Alert model — one wallet address watched on behalf of one email."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from solsignal.engine.models.base import Base, MetadataMixin, TimestampMixin


def new_alert_id() -> str:
    return uuid.uuid4().hex


class Alert(Base, TimestampMixin, MetadataMixin):
    """A subscription linking a monitored wallet address to a destination.

    ``wallet_address`` is matched exactly against activity events: no case
    folding, no trimming.
    """

    __tablename__ = "alerts"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=new_alert_id, comment="Unique alert ID"
    )
    wallet_address: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True, comment="Monitored wallet address"
    )
    email: Mapped[str] = mapped_column(Text, nullable=False, comment="Notification destination")
    webhook_id: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        default=None,
        comment="Registry list the address was appended to",
    )

    def to_dict(self) -> dict[str, Any]:
        """Plain snapshot of the record's fields."""
        return {
            "id": self.id,
            "wallet_address": self.wallet_address,
            "email": self.email,
            "webhook_id": self.webhook_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "metadata": dict(self.metadata_ or {}),
        }

    def __repr__(self) -> str:
        return f"<Alert id={self.id} wallet={self.wallet_address[:8]}...>"
