"""Convenience factory for wiring the monitoring stack."""

from __future__ import annotations

import datetime
import functools

from hostwatch.core.config import Settings
from hostwatch.core.types import RetryPolicy, Thresholds
from hostwatch.monitor.checker import ResourceCheck
from hostwatch.monitor.dedup import AlertDeduplicator
from hostwatch.monitor.evaluator import ThresholdEvaluator
from hostwatch.monitor.formatters import build_alert_report
from hostwatch.monitor.ledger import AlertLedger, InMemoryLedger, JsonFileLedger
from hostwatch.monitor.notifier import EmailNotifier, Notifier
from hostwatch.monitor.scheduler import CheckScheduler
from hostwatch.probe.base import MetricProbe
from hostwatch.probe.system import PsutilProbe


def create_ledger(path: str | None) -> AlertLedger:
    if path:
        return JsonFileLedger(path)
    return InMemoryLedger()


def create_monitor_stack(
    settings: Settings,
    probe: MetricProbe | None = None,
    notifier: Notifier | None = None,
) -> tuple[CheckScheduler, ResourceCheck]:
    """Build the scheduler and the check it drives from settings.

    The probe is initialized here, once, before the first check.

    Returns:
        (scheduler, check)
    """
    if probe is None:
        probe = PsutilProbe(
            cpu_warmup_secs=settings.probe.cpu_warmup_secs,
            all_partitions=settings.probe.all_partitions,
        )
    probe.initialize()

    if notifier is None:
        notifier = EmailNotifier(
            config=settings.mail,
            retry=RetryPolicy(
                max_attempts=settings.retry.max_attempts,
                backoff_secs=settings.retry.backoff_secs,
            ),
        )

    t = settings.thresholds
    evaluator = ThresholdEvaluator(
        thresholds=Thresholds(
            cpu_percent=t.cpu_percent,
            ram_percent=t.ram_percent,
            disk_percent=t.disk_percent,
        ),
        consecutive_samples=t.consecutive_samples,
    )

    alerts = settings.alerts
    dedup = AlertDeduplicator(
        ledger=create_ledger(alerts.ledger_path),
        cooldown=datetime.timedelta(hours=alerts.cooldown_hours),
    )

    check = ResourceCheck(
        probe=probe,
        evaluator=evaluator,
        deduplicator=dedup,
        notifier=notifier,
        recipients=alerts.recipients,
        key_mode=alerts.key_mode,
        mark_sent_requires_delivery=alerts.mark_sent_requires_delivery,
        formatter=functools.partial(build_alert_report, subject=alerts.subject),
    )

    sched = settings.scheduler
    scheduler = CheckScheduler(
        check_fn=check.run_once,
        hour_utc=sched.target_hour_utc,
        pause_secs=sched.post_check_pause_secs,
        run_on_startup=sched.run_on_startup,
    )
    return scheduler, check
