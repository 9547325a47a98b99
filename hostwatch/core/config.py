"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class AlertKeyMode(StrEnum):
    """How findings are partitioned into independent cooldowns."""

    GLOBAL = "global"  # one key for any resource over threshold
    PER_RESOURCE = "per_resource"  # cpu, ram, disk:<name>


class MailConfig(BaseModel):
    """SMTP transport configuration."""

    server: str = "localhost"
    port: int = 587
    sender_name: str = "Resource Monitor"
    sender_email: str = ""
    username: str = ""
    password: SecretStr = SecretStr("")
    use_ssl: bool = False
    starttls: bool = True
    timeout_secs: float = 30.0


class RetryConfig(BaseModel):
    """Per-recipient delivery retry budget."""

    max_attempts: int = Field(default=3, ge=1)
    backoff_secs: float = Field(default=2.0, ge=0.0)


class ThresholdsConfig(BaseModel):
    """Utilization thresholds (inclusive) that make a resource alertable."""

    cpu_percent: float = 80.0
    ram_percent: float = 90.0
    disk_percent: float = 95.0
    consecutive_samples: int = Field(default=1, ge=1)


class AlertsConfig(BaseModel):
    """Recipients, subject and deduplication policy."""

    recipients: str = ""
    subject: str = "Resources Communication"
    cooldown_hours: float = 6.0
    key_mode: AlertKeyMode = AlertKeyMode.GLOBAL
    mark_sent_requires_delivery: bool = False
    ledger_path: str | None = None


class SchedulerConfig(BaseModel):
    """Daily check schedule."""

    target_hour_utc: int = Field(default=7, ge=0, le=23)
    post_check_pause_secs: float = 5.0
    run_on_startup: bool = True


class ProbeConfig(BaseModel):
    """Metric probe tuning."""

    cpu_warmup_secs: float = 0.5
    all_partitions: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    mail: MailConfig = MailConfig()
    retry: RetryConfig = RetryConfig()
    thresholds: ThresholdsConfig = ThresholdsConfig()
    alerts: AlertsConfig = AlertsConfig()
    scheduler: SchedulerConfig = SchedulerConfig()
    probe: ProbeConfig = ProbeConfig()
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
