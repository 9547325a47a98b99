"""Domain types for resource sampling, alert findings and delivery."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Single dedup key covering "any resource over threshold".
GLOBAL_ALERT_KEY = "GlobalStatus"


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


# ── Sampling ─────────────────────────────────────────────────────


class DiskUsage(BaseModel):
    """Usage of one ready volume at capture time."""

    model_config = ConfigDict(frozen=True)

    name: str
    used_percent: float
    free_gib: float


class ResourceSnapshot(BaseModel):
    """Point-in-time CPU / RAM / disk measurement."""

    model_config = ConfigDict(frozen=True)

    cpu_percent: float
    ram_percent: int = Field(ge=0, le=100)
    disks: tuple[DiskUsage, ...] = ()
    captured_at: datetime.datetime = Field(default_factory=utcnow)


class HostMetadata(BaseModel):
    """Identity of the monitored machine, shown in reports."""

    model_config = ConfigDict(frozen=True)

    hostname: str = "Unknown"
    user: str = "Unknown"
    ip_address: str = "Unknown"


# ── Evaluation ───────────────────────────────────────────────────


class Thresholds(BaseModel):
    """Inclusive alert thresholds, in percent."""

    model_config = ConfigDict(frozen=True)

    cpu_percent: float = 80.0
    ram_percent: float = 90.0
    disk_percent: float = 95.0


class AlertFinding(BaseModel):
    """Alert decision and contributing causes for one snapshot."""

    model_config = ConfigDict(frozen=True)

    triggered: bool = False
    cpu_high: bool = False
    ram_high: bool = False
    disk_high: tuple[DiskUsage, ...] = ()

    @property
    def high_disk_names(self) -> list[str]:
        return [d.name for d in self.disk_high]


# ── Delivery ─────────────────────────────────────────────────────


class RetryPolicy(BaseModel):
    """Fixed-backoff retry budget applied per recipient."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    backoff_secs: float = Field(default=2.0, ge=0.0)


class AlertReport(BaseModel):
    """Formatted subject + body handed to the notifier."""

    subject: str
    body: str


class NotificationRequest(BaseModel):
    """One alert event addressed to a fixed recipient list."""

    model_config = ConfigDict(frozen=True)

    recipients: tuple[str, ...]
    subject: str
    body: str

    @field_validator("recipients")
    @classmethod
    def _dedupe_recipients(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for addr in value:
            addr = addr.strip()
            if addr:
                seen.setdefault(addr, None)
        if not seen:
            raise ValueError("at least one recipient is required")
        return tuple(seen)


class RecipientOutcome(BaseModel):
    """Delivery result for a single recipient."""

    recipient: str
    succeeded: bool
    attempts: int
    error: str | None = None


class DeliveryReport(BaseModel):
    """Per-recipient outcomes for one notification request."""

    outcomes: list[RecipientOutcome] = Field(default_factory=list)

    @property
    def any_succeeded(self) -> bool:
        return any(o.succeeded for o in self.outcomes)

    @property
    def all_succeeded(self) -> bool:
        return bool(self.outcomes) and all(o.succeeded for o in self.outcomes)

    @property
    def failed(self) -> list[str]:
        return [o.recipient for o in self.outcomes if not o.succeeded]


class CheckOutcome(BaseModel):
    """What a single resource check cycle observed and did."""

    snapshot: ResourceSnapshot
    finding: AlertFinding
    alert_keys: list[str] = Field(default_factory=list)
    suppressed: bool = False
    notified: bool = False
    delivery: DeliveryReport | None = None
