"""SystemConfig model — the cached aggregate document."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - SQLAlchemy needs this at runtime for Mapped[datetime]

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from solsignal.engine.models.base import Base

SYSTEM_CONFIG_ID = "solsignal"


class SystemConfig(Base):
    """Single-row cache of the live alert count.

    Always overwritten with a fresh count, never incremented.
    """

    __tablename__ = "config"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=SYSTEM_CONFIG_ID)
    system_alert_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<SystemConfig id={self.id} count={self.system_alert_count}>"
