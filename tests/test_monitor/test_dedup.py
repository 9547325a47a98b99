"""Tests for AlertDeduplicator and alert key derivation."""

from __future__ import annotations

import datetime

from hostwatch.core.config import AlertKeyMode
from hostwatch.core.types import GLOBAL_ALERT_KEY, AlertFinding, DiskUsage
from hostwatch.monitor.dedup import AlertDeduplicator, alert_keys
from hostwatch.monitor.ledger import InMemoryLedger

T0 = datetime.datetime(2025, 6, 15, 7, 0, 0, tzinfo=datetime.UTC)


class FakeClock:
    def __init__(self, now: datetime.datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kw: float) -> None:
        self.now += datetime.timedelta(**kw)


# ── Cooldown ────────────────────────────────────────────────────


class TestCooldown:
    def test_never_sent_is_eligible(self) -> None:
        dedup = AlertDeduplicator(clock=FakeClock())
        assert dedup.can_send("k") is True

    def test_blocked_right_after_send(self) -> None:
        clock = FakeClock()
        dedup = AlertDeduplicator(clock=clock)
        dedup.mark_sent("k")
        clock.advance(hours=1)
        assert dedup.can_send("k") is False

    def test_exactly_cooldown_still_blocked(self) -> None:
        clock = FakeClock()
        dedup = AlertDeduplicator(clock=clock)
        dedup.mark_sent("k")
        clock.advance(hours=6)
        assert dedup.can_send("k") is False

    def test_just_past_cooldown_eligible(self) -> None:
        clock = FakeClock()
        dedup = AlertDeduplicator(clock=clock)
        dedup.mark_sent("k")
        clock.advance(hours=6, microseconds=1)
        assert dedup.can_send("k") is True

    def test_keys_independent(self) -> None:
        dedup = AlertDeduplicator(clock=FakeClock())
        dedup.mark_sent("cpu")
        assert dedup.can_send("cpu") is False
        assert dedup.can_send("disk:/") is True

    def test_mark_sent_overwrites(self) -> None:
        clock = FakeClock()
        ledger = InMemoryLedger()
        dedup = AlertDeduplicator(ledger=ledger, clock=clock)
        dedup.mark_sent("k")
        clock.advance(hours=7)
        dedup.mark_sent("k")
        assert ledger.get("k") == T0 + datetime.timedelta(hours=7)
        assert dedup.can_send("k") is False

    def test_custom_cooldown(self) -> None:
        clock = FakeClock()
        dedup = AlertDeduplicator(cooldown=datetime.timedelta(minutes=10), clock=clock)
        dedup.mark_sent("k")
        clock.advance(minutes=11)
        assert dedup.can_send("k") is True

    def test_key_absent_until_marked(self) -> None:
        ledger = InMemoryLedger()
        dedup = AlertDeduplicator(ledger=ledger, clock=FakeClock())
        dedup.can_send("k")
        assert ledger.keys() == []
        dedup.mark_sent("k")
        assert ledger.keys() == ["k"]


# ── Alert keys ──────────────────────────────────────────────────


def _finding(cpu: bool = False, ram: bool = False, disks: tuple[str, ...] = ()) -> AlertFinding:
    disk_high = tuple(DiskUsage(name=n, used_percent=99.0, free_gib=1.0) for n in disks)
    return AlertFinding(
        triggered=cpu or ram or bool(disk_high),
        cpu_high=cpu,
        ram_high=ram,
        disk_high=disk_high,
    )


class TestAlertKeys:
    def test_not_triggered_has_no_keys(self) -> None:
        assert alert_keys(_finding()) == []
        assert alert_keys(_finding(), AlertKeyMode.PER_RESOURCE) == []

    def test_global_mode_single_key(self) -> None:
        assert alert_keys(_finding(cpu=True, disks=("/",))) == [GLOBAL_ALERT_KEY]

    def test_per_resource_mode(self) -> None:
        keys = alert_keys(
            _finding(cpu=True, ram=True, disks=("/", "/data")),
            AlertKeyMode.PER_RESOURCE,
        )
        assert keys == ["cpu", "ram", "disk:/", "disk:/data"]

    def test_per_resource_disk_only(self) -> None:
        assert alert_keys(_finding(disks=("C:\\",)), AlertKeyMode.PER_RESOURCE) == ["disk:C:\\"]
