"""Tests for domain types — immutability, recipient normalisation, reports."""

from __future__ import annotations

import datetime

import pytest
from pydantic import ValidationError

from hostwatch.core.types import (
    AlertFinding,
    DeliveryReport,
    DiskUsage,
    NotificationRequest,
    RecipientOutcome,
    ResourceSnapshot,
    RetryPolicy,
)


class TestResourceSnapshot:
    def test_frozen(self) -> None:
        snap = ResourceSnapshot(cpu_percent=10.0, ram_percent=20)
        with pytest.raises(ValidationError):
            snap.cpu_percent = 99.0  # type: ignore[misc]

    def test_ram_range_enforced(self) -> None:
        with pytest.raises(ValidationError):
            ResourceSnapshot(cpu_percent=10.0, ram_percent=101)

    def test_captured_at_is_utc(self) -> None:
        snap = ResourceSnapshot(cpu_percent=10.0, ram_percent=20)
        assert snap.captured_at.tzinfo is not None
        assert snap.captured_at.utcoffset() == datetime.timedelta(0)

    def test_disks_are_ordered(self) -> None:
        disks = [DiskUsage(name=n, used_percent=1.0, free_gib=1.0) for n in ("/b", "/a")]
        snap = ResourceSnapshot(cpu_percent=1.0, ram_percent=1, disks=disks)  # type: ignore[arg-type]
        assert [d.name for d in snap.disks] == ["/b", "/a"]


class TestDiskUsage:
    def test_hashable(self) -> None:
        d1 = DiskUsage(name="/", used_percent=50.0, free_gib=10.0)
        d2 = DiskUsage(name="/", used_percent=50.0, free_gib=10.0)
        assert len({d1, d2}) == 1


class TestAlertFinding:
    def test_defaults_not_triggered(self) -> None:
        f = AlertFinding()
        assert f.triggered is False
        assert f.disk_high == ()

    def test_high_disk_names(self) -> None:
        f = AlertFinding(
            triggered=True,
            disk_high=(DiskUsage(name="C:\\", used_percent=99.0, free_gib=1.0),),
        )
        assert f.high_disk_names == ["C:\\"]


class TestNotificationRequest:
    def test_dedupes_and_trims(self) -> None:
        req = NotificationRequest(
            recipients=("a@x.io", " b@x.io ", "a@x.io", ""),  # type: ignore[arg-type]
            subject="s",
            body="b",
        )
        assert req.recipients == ("a@x.io", "b@x.io")

    def test_empty_recipients_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NotificationRequest(recipients=(), subject="s", body="b")

    def test_whitespace_only_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NotificationRequest(recipients=("  ",), subject="s", body="b")


class TestRetryPolicy:
    def test_defaults(self) -> None:
        p = RetryPolicy()
        assert p.max_attempts == 3
        assert p.backoff_secs == 2.0

    def test_min_attempts(self) -> None:
        with pytest.raises(ValidationError):
            RetryPolicy(max_attempts=0)


class TestDeliveryReport:
    def _report(self, *results: bool) -> DeliveryReport:
        return DeliveryReport(outcomes=[
            RecipientOutcome(recipient=f"r{i}", succeeded=ok, attempts=1)
            for i, ok in enumerate(results)
        ])

    def test_all_succeeded(self) -> None:
        r = self._report(True, True)
        assert r.all_succeeded
        assert r.any_succeeded
        assert r.failed == []

    def test_partial(self) -> None:
        r = self._report(False, True)
        assert not r.all_succeeded
        assert r.any_succeeded
        assert r.failed == ["r0"]

    def test_empty_report(self) -> None:
        r = DeliveryReport()
        assert not r.all_succeeded
        assert not r.any_succeeded
