"""Threshold evaluation — pure single-sample rule plus a windowed variant."""

from __future__ import annotations

from collections import deque

from hostwatch.core.types import AlertFinding, ResourceSnapshot, Thresholds


def evaluate(
    snapshot: ResourceSnapshot,
    cpu_threshold: float = 80.0,
    ram_threshold: float = 90.0,
    disk_threshold: float = 95.0,
) -> AlertFinding:
    """Decide whether a snapshot is alertable.

    Every comparison is inclusive (``>=``).  Disks are checked one by one;
    ``disk_high`` keeps the snapshot's volume order.
    """
    cpu_high = snapshot.cpu_percent >= cpu_threshold
    ram_high = snapshot.ram_percent >= ram_threshold
    disk_high = tuple(d for d in snapshot.disks if d.used_percent >= disk_threshold)
    return AlertFinding(
        triggered=cpu_high or ram_high or bool(disk_high),
        cpu_high=cpu_high,
        ram_high=ram_high,
        disk_high=disk_high,
    )


class ThresholdEvaluator:
    """Applies thresholds over a rolling window of recent snapshots.

    A resource is reported high only when it was high in each of the last
    ``consecutive_samples`` snapshots (disks are matched by name).  With the
    default window of one this is exactly :func:`evaluate`.
    """

    def __init__(
        self,
        thresholds: Thresholds | None = None,
        consecutive_samples: int = 1,
    ) -> None:
        if consecutive_samples < 1:
            raise ValueError("consecutive_samples must be >= 1")
        self._thresholds = thresholds or Thresholds()
        self._window: deque[AlertFinding] = deque(maxlen=consecutive_samples)

    @property
    def thresholds(self) -> Thresholds:
        return self._thresholds

    @property
    def window_size(self) -> int:
        return self._window.maxlen or 1

    def evaluate(self, snapshot: ResourceSnapshot) -> AlertFinding:
        current = evaluate(
            snapshot,
            cpu_threshold=self._thresholds.cpu_percent,
            ram_threshold=self._thresholds.ram_percent,
            disk_threshold=self._thresholds.disk_percent,
        )
        self._window.append(current)

        if self.window_size == 1:
            return current
        if len(self._window) < self.window_size:
            return AlertFinding()

        cpu_high = all(f.cpu_high for f in self._window)
        ram_high = all(f.ram_high for f in self._window)
        sustained = set.intersection(
            *(set(f.high_disk_names) for f in self._window)
        )
        disk_high = tuple(d for d in current.disk_high if d.name in sustained)
        return AlertFinding(
            triggered=cpu_high or ram_high or bool(disk_high),
            cpu_high=cpu_high,
            ram_high=ram_high,
            disk_high=disk_high,
        )

    def reset(self) -> None:
        self._window.clear()
