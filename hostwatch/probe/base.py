"""Abstract metric probe — the sampling surface the monitor depends on."""

from __future__ import annotations

import abc

from hostwatch.core.types import DiskUsage


class MetricProbe(abc.ABC):
    """Samples host utilization.

    Implementations own whatever counter state the OS API needs.  Call
    ``initialize()`` once at startup; ``sample_cpu_percent()`` may block
    for a warm-up interval, so async callers should run it in a worker
    thread.
    """

    @abc.abstractmethod
    def initialize(self) -> None:
        """Prime counters that need a baseline reading."""

    @abc.abstractmethod
    def sample_cpu_percent(self) -> float:
        """Return total CPU utilization in percent (blocking)."""

    @abc.abstractmethod
    def sample_ram_percent(self) -> int:
        """Return physical memory load as an integer in [0, 100]."""

    @abc.abstractmethod
    def list_ready_disks(self) -> list[DiskUsage]:
        """Return usage for every mounted, readable volume."""
