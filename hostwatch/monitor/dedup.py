"""Alert deduplication — per-key cooldown gate around sending."""

from __future__ import annotations

import datetime
from collections.abc import Callable

import structlog

from hostwatch.core.config import AlertKeyMode
from hostwatch.core.types import GLOBAL_ALERT_KEY, AlertFinding, utcnow
from hostwatch.monitor.ledger import AlertLedger, InMemoryLedger

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime.datetime]

DEFAULT_COOLDOWN = datetime.timedelta(hours=6)


class AlertDeduplicator:
    """Suppresses repeat alerts for the same key within a cooldown window.

    ``can_send`` and ``mark_sent`` are two separate steps.  That is safe
    only while a single check is in flight, which the scheduler
    guarantees; concurrent callers would need an atomic compare-and-set
    on the ledger instead.
    """

    def __init__(
        self,
        ledger: AlertLedger | None = None,
        cooldown: datetime.timedelta = DEFAULT_COOLDOWN,
        clock: Clock = utcnow,
    ) -> None:
        self._ledger = ledger if ledger is not None else InMemoryLedger()
        self._cooldown = cooldown
        self._clock = clock

    @property
    def cooldown(self) -> datetime.timedelta:
        return self._cooldown

    @property
    def ledger(self) -> AlertLedger:
        return self._ledger

    def can_send(self, key: str) -> bool:
        """True if *key* was never sent or its cooldown has strictly elapsed."""
        last = self._ledger.get(key)
        if last is None:
            return True
        return self._clock() - last > self._cooldown

    def mark_sent(self, key: str) -> None:
        now = self._clock()
        self._ledger.set(key, now)
        logger.debug("alert_marked_sent", key=key, sent_at=now.isoformat())


def alert_keys(finding: AlertFinding, mode: AlertKeyMode = AlertKeyMode.GLOBAL) -> list[str]:
    """Dedup keys raised by *finding* (empty when nothing triggered)."""
    if not finding.triggered:
        return []
    if mode == AlertKeyMode.GLOBAL:
        return [GLOBAL_ALERT_KEY]

    keys: list[str] = []
    if finding.cpu_high:
        keys.append("cpu")
    if finding.ram_high:
        keys.append("ram")
    keys.extend(f"disk:{name}" for name in finding.high_disk_names)
    return keys
