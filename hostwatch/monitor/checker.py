"""One resource check cycle: sample → evaluate → dedup gate → notify → record."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import structlog

from hostwatch.core.config import AlertKeyMode
from hostwatch.core.types import (
    CheckOutcome,
    DeliveryReport,
    HostMetadata,
    NotificationRequest,
    ResourceSnapshot,
)
from hostwatch.monitor.dedup import AlertDeduplicator, alert_keys
from hostwatch.monitor.evaluator import ThresholdEvaluator
from hostwatch.monitor.formatters import ReportFormatter, build_alert_report
from hostwatch.monitor.notifier import Notifier
from hostwatch.probe.base import MetricProbe
from hostwatch.probe.host import collect_host_metadata

logger = structlog.get_logger(__name__)

HostFn = Callable[[], HostMetadata]


def parse_recipients(raw: str) -> list[str]:
    """Split a ``;``-delimited address list, trimming and dropping empties/dupes."""
    seen: dict[str, None] = {}
    for part in raw.split(";"):
        addr = part.strip()
        if addr:
            seen.setdefault(addr, None)
    return list(seen)


class ResourceCheck:
    """Runs a single monitoring cycle against injected collaborators.

    Usage::

        check = ResourceCheck(probe, evaluator, dedup, notifier, "a@x;b@x")
        outcome = await check.run_once()
    """

    def __init__(
        self,
        probe: MetricProbe,
        evaluator: ThresholdEvaluator,
        deduplicator: AlertDeduplicator,
        notifier: Notifier,
        recipients: str,
        key_mode: AlertKeyMode = AlertKeyMode.GLOBAL,
        mark_sent_requires_delivery: bool = False,
        formatter: ReportFormatter = build_alert_report,
        host_fn: HostFn = collect_host_metadata,
    ) -> None:
        self._probe = probe
        self._evaluator = evaluator
        self._dedup = deduplicator
        self._notifier = notifier
        self._recipients = recipients
        self._key_mode = key_mode
        self._requires_delivery = mark_sent_requires_delivery
        self._formatter = formatter
        self._host_fn = host_fn

    async def sample(self) -> ResourceSnapshot:
        """Capture a snapshot; the blocking CPU read runs in a worker thread."""
        ram = self._probe.sample_ram_percent()
        disks = self._probe.list_ready_disks()
        cpu = await asyncio.to_thread(self._probe.sample_cpu_percent)
        return ResourceSnapshot(cpu_percent=cpu, ram_percent=ram, disks=tuple(disks))

    async def run_once(self) -> CheckOutcome:
        snapshot = await self.sample()
        finding = self._evaluator.evaluate(snapshot)
        outcome = CheckOutcome(snapshot=snapshot, finding=finding)

        if not finding.triggered:
            logger.info(
                "resources_ok",
                cpu=round(snapshot.cpu_percent, 1),
                ram=snapshot.ram_percent,
                disks=len(snapshot.disks),
            )
            return outcome

        keys = alert_keys(finding, self._key_mode)
        eligible = [k for k in keys if self._dedup.can_send(k)]
        outcome.alert_keys = eligible
        logger.warning(
            "threshold_exceeded",
            cpu_high=finding.cpu_high,
            ram_high=finding.ram_high,
            disks_high=finding.high_disk_names,
            keys=keys,
            eligible=eligible,
        )
        if not eligible:
            logger.info("alert_suppressed", keys=keys)
            outcome.suppressed = True
            return outcome

        host = await asyncio.to_thread(self._host_fn)
        report = self._formatter(snapshot, finding, self._evaluator.thresholds, host)
        delivery = await self._notify(report.subject, report.body)
        outcome.delivery = delivery
        outcome.notified = delivery is not None

        if self._requires_delivery and (delivery is None or not delivery.any_succeeded):
            logger.warning("alert_not_marked_sent", keys=eligible)
            return outcome

        for key in eligible:
            self._dedup.mark_sent(key)
        return outcome

    async def _notify(self, subject: str, body: str) -> DeliveryReport | None:
        recipients = parse_recipients(self._recipients)
        if not recipients:
            logger.warning("no_recipients")
            return None

        logger.info("sending_alert", recipients=len(recipients))
        request = NotificationRequest(
            recipients=tuple(recipients),
            subject=subject,
            body=body,
        )
        return await self._notifier.send(request)
