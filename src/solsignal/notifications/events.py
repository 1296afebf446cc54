"""Activity event types and ingress batch parsing.

A Helius enhanced-webhook delivery is a JSON array of transactions. Each
transaction lists the accounts it touched under ``accountData`` and carries a
human-readable ``description``. Every touched account becomes one
:class:`ActivityEvent`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from solsignal.errors.alert_errors import MalformedEvent, MalformedRequest
from solsignal.errors.definitions import ErrEmptyBatch


@dataclass(frozen=True)
class ActivityEvent:
    """One observed change to a monitored address."""

    address: str
    description: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DispatchSummary:
    """Aggregate outcome of one dispatch call."""

    success_count: int = 0
    fail_count: int = 0

    @property
    def total(self) -> int:
        return self.success_count + self.fail_count


# ---------------------------------------------------------------------------
# Wire schema
# ---------------------------------------------------------------------------


class AccountDataEntry(BaseModel):
    """One ``accountData`` element; extra Helius fields are ignored."""

    account: str | None = None


class ActivityTransaction(BaseModel):
    """One element of the Helius webhook array."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    account_data: list[AccountDataEntry] = Field(alias="accountData")
    description: str

    def to_events(self) -> list[ActivityEvent]:
        """Expand into one event per touched account, in order."""
        events = []
        for entry in self.account_data:
            if not entry.account:
                raise MalformedEvent("accountData entry has no account address")
            events.append(
                ActivityEvent(
                    address=entry.account,
                    description=self.description,
                    metadata=dict(self.model_extra or {}),
                )
            )
        return events


_BATCH_ADAPTER = TypeAdapter(list[ActivityTransaction])


def parse_activity_batch(payload: Any) -> list[ActivityEvent]:
    """Validate an ingress body and flatten it into activity events.

    Raises:
        MalformedRequest: If the body is not a non-empty array of transactions
            each carrying ``accountData`` and ``description``.
        MalformedEvent: If an ``accountData`` entry lacks an address.
    """
    try:
        transactions = _BATCH_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        errors = exc.errors()
        location = ".".join(str(p) for p in errors[0]["loc"]) if errors else "body"
        msg = f"malformed activity batch at {location}"
        raise MalformedRequest(msg) from exc
    if not transactions:
        raise ErrEmptyBatch

    events: list[ActivityEvent] = []
    for tx in transactions:
        events.extend(tx.to_events())
    return events
