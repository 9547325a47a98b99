"""Metric probes — host utilization sampling and host identity."""

from hostwatch.probe.base import MetricProbe
from hostwatch.probe.exceptions import ProbeError, ProbeNotInitializedError
from hostwatch.probe.host import collect_host_metadata
from hostwatch.probe.system import PsutilProbe

__all__ = [
    "MetricProbe",
    "ProbeError",
    "ProbeNotInitializedError",
    "PsutilProbe",
    "collect_host_metadata",
]
