"""SentAlert model — append-only delivery outcome records."""

from __future__ import annotations

import enum
import time
from typing import Any

from sqlalchemy import JSON, BigInteger, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from solsignal.engine.models.base import Base


class DeliveryStatus(enum.StrEnum):
    """Outcome of one notification attempt."""

    SUCCESS = "success"
    FAIL = "fail"


def now_millis() -> int:
    return int(time.time() * 1000)


class SentAlert(Base):
    """One notification attempt for one (activity event, alert) pair.

    Rows are inserted once and never updated. They form an audit trail and
    are never consulted before sending.
    """

    __tablename__ = "sent_alerts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=now_millis, comment="Epoch milliseconds"
    )
    status: Mapped[DeliveryStatus] = mapped_column(
        Enum(
            DeliveryStatus,
            native_enum=False,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    alert_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    wallet_address: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    webhook_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    snapshot: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)

    @classmethod
    def from_alert(
        cls,
        alert: dict[str, Any],
        status: DeliveryStatus,
        *,
        error: str | None = None,
    ) -> SentAlert:
        """Build a record copying the alert's fields as they were at send time."""
        return cls(
            created_at=now_millis(),
            status=status,
            alert_id=alert["id"],
            wallet_address=alert["wallet_address"],
            email=alert["email"],
            webhook_id=alert.get("webhook_id"),
            snapshot=dict(alert),
            error=error,
        )

    def __repr__(self) -> str:
        return f"<SentAlert id={self.id} alert={self.alert_id} status={self.status}>"
