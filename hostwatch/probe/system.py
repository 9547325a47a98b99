"""psutil-backed probe for the local machine."""

from __future__ import annotations

import time
from collections.abc import Callable

import psutil
import structlog

from hostwatch.core.types import DiskUsage
from hostwatch.probe.base import MetricProbe
from hostwatch.probe.exceptions import ProbeNotInitializedError

logger = structlog.get_logger(__name__)

_GIB = 1024**3


class PsutilProbe(MetricProbe):
    """Samples CPU, memory and disks through psutil.

    ``psutil.cpu_percent(interval=None)`` reports utilization since the
    previous call, so the first call only establishes a baseline.
    ``initialize()`` makes that call; each sample then waits
    ``cpu_warmup_secs`` before reading so the window is never empty.
    """

    def __init__(
        self,
        cpu_warmup_secs: float = 0.5,
        all_partitions: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._cpu_warmup_secs = cpu_warmup_secs
        self._all_partitions = all_partitions
        self._sleep = sleep
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        if self._initialized:
            return
        psutil.cpu_percent(interval=None)
        self._initialized = True
        logger.debug("cpu_counter_primed")

    def sample_cpu_percent(self) -> float:
        if not self._initialized:
            raise ProbeNotInitializedError("call initialize() before sampling CPU")
        if self._cpu_warmup_secs > 0:
            self._sleep(self._cpu_warmup_secs)
        return float(psutil.cpu_percent(interval=None))

    def sample_ram_percent(self) -> int:
        load = round(psutil.virtual_memory().percent)
        return max(0, min(100, int(load)))

    def list_ready_disks(self) -> list[DiskUsage]:
        disks: list[DiskUsage] = []
        seen: set[str] = set()
        for part in psutil.disk_partitions(all=self._all_partitions):
            mount = part.mountpoint
            if mount in seen:
                continue
            seen.add(mount)
            try:
                usage = psutil.disk_usage(mount)
            except (OSError, RuntimeError):
                # Removable drives without media, stale network mounts, etc.
                logger.debug("disk_not_ready", mountpoint=mount)
                continue
            if usage.total <= 0:
                continue
            used = usage.total - usage.free
            disks.append(DiskUsage(
                name=mount,
                used_percent=100.0 * used / usage.total,
                free_gib=usage.free / _GIB,
            ))
        return disks
