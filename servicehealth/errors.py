"""Exception hierarchy for dependency probing and report aggregation."""

from __future__ import annotations


class ServiceHealthError(Exception):
    """Base class for errors raised by the service health package."""


class ProbeFailure(ServiceHealthError):
    """A dependency check failed; the probe is reported as ``error``."""


class ProbeTimeout(ProbeFailure):
    """A dependency check did not finish within its time budget."""

    def __init__(self, timeout: float) -> None:
        super().__init__("timeout")
        self.timeout = timeout


class ProbeAdvisory(ServiceHealthError):
    """A dependency check completed but flagged a non-fatal condition.

    Probes raise this to be reported as ``warning`` instead of ``ok``.
    """


class AggregatorFailure(ServiceHealthError):
    """The aggregation itself failed, so no per-probe data is available."""
