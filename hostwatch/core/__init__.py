"""Core module — config, types, logging."""

from hostwatch.core.config import Settings, get_settings, load_settings, reset_settings
from hostwatch.core.logging import setup_logging
from hostwatch.core.types import (
    GLOBAL_ALERT_KEY,
    AlertFinding,
    AlertReport,
    CheckOutcome,
    DeliveryReport,
    DiskUsage,
    HostMetadata,
    NotificationRequest,
    RecipientOutcome,
    ResourceSnapshot,
    RetryPolicy,
    Thresholds,
)

__all__ = [
    "GLOBAL_ALERT_KEY",
    "AlertFinding",
    "AlertReport",
    "CheckOutcome",
    "DeliveryReport",
    "DiskUsage",
    "HostMetadata",
    "NotificationRequest",
    "RecipientOutcome",
    "ResourceSnapshot",
    "RetryPolicy",
    "Settings",
    "Thresholds",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
