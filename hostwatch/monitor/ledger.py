"""Alert ledgers — where last-sent timestamps per alert key live."""

from __future__ import annotations

import abc
import datetime
import json
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class AlertLedger(abc.ABC):
    """Key → last-sent UTC timestamp.  A missing key means "never sent"."""

    @abc.abstractmethod
    def get(self, key: str) -> datetime.datetime | None:
        """Return when *key* was last marked sent, or None."""

    @abc.abstractmethod
    def set(self, key: str, sent_at: datetime.datetime) -> None:
        """Record *sent_at* for *key*, replacing any previous value."""

    @abc.abstractmethod
    def keys(self) -> list[str]:
        """All keys that have been marked sent."""


class InMemoryLedger(AlertLedger):
    """Process-lifetime ledger; restarting the process resets all cooldowns."""

    def __init__(self) -> None:
        self._entries: dict[str, datetime.datetime] = {}

    def get(self, key: str) -> datetime.datetime | None:
        return self._entries.get(key)

    def set(self, key: str, sent_at: datetime.datetime) -> None:
        self._entries[key] = sent_at

    def keys(self) -> list[str]:
        return list(self._entries)


class JsonFileLedger(AlertLedger):
    """Ledger persisted to a JSON file so cooldowns survive restarts.

    The file holds ``{"key": "<iso-8601 timestamp>", ...}``.  It is read
    once on construction and rewritten atomically (temp file + replace) on
    every ``set``.  An unreadable file is logged and treated as empty.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._entries: dict[str, datetime.datetime] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> datetime.datetime | None:
        return self._entries.get(key)

    def set(self, key: str, sent_at: datetime.datetime) -> None:
        self._entries[key] = sent_at
        self._save()

    def keys(self) -> list[str]:
        return list(self._entries)

    def _load(self) -> dict[str, datetime.datetime]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path) as f:
                raw = json.load(f)
        except (OSError, ValueError):
            logger.exception("ledger_load_error", path=str(self._path))
            return {}
        if not isinstance(raw, dict):
            logger.warning("ledger_malformed", path=str(self._path))
            return {}

        entries: dict[str, datetime.datetime] = {}
        for key, value in raw.items():
            try:
                ts = datetime.datetime.fromisoformat(str(value))
            except ValueError:
                logger.warning("ledger_bad_timestamp", key=key, value=value)
                continue
            if ts.tzinfo is None:
                ts = ts.replace(tzinfo=datetime.UTC)
            entries[str(key)] = ts
        return entries

    def _save(self) -> None:
        """Write atomically.  A failed write keeps the in-memory entry."""
        payload = {k: v.isoformat() for k, v in self._entries.items()}
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w") as f:
                json.dump(payload, f, indent=2, sort_keys=True)
            tmp.replace(self._path)
        except OSError:
            logger.exception("ledger_save_error", path=str(self._path))
            tmp.unlink(missing_ok=True)
