"""Threshold evaluation, alert deduplication, notification and scheduling."""

from hostwatch.monitor.checker import ResourceCheck, parse_recipients
from hostwatch.monitor.dedup import AlertDeduplicator, alert_keys
from hostwatch.monitor.evaluator import ThresholdEvaluator, evaluate
from hostwatch.monitor.factory import create_monitor_stack
from hostwatch.monitor.formatters import build_alert_report
from hostwatch.monitor.ledger import AlertLedger, InMemoryLedger, JsonFileLedger
from hostwatch.monitor.notifier import EmailNotifier, Notifier
from hostwatch.monitor.scheduler import CheckScheduler, next_run_delay
from hostwatch.monitor.transport import MailTransport, SmtpTransport

__all__ = [
    "AlertDeduplicator",
    "AlertLedger",
    "CheckScheduler",
    "EmailNotifier",
    "InMemoryLedger",
    "JsonFileLedger",
    "MailTransport",
    "Notifier",
    "ResourceCheck",
    "SmtpTransport",
    "ThresholdEvaluator",
    "alert_keys",
    "build_alert_report",
    "create_monitor_stack",
    "evaluate",
    "next_run_delay",
    "parse_recipients",
]
