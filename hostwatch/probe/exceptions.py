"""Exception hierarchy for metric probes."""

from __future__ import annotations


class ProbeError(Exception):
    """Base exception for all probe errors."""


class ProbeNotInitializedError(ProbeError):
    """A CPU sample was requested before the counter was primed."""
