"""Pydantic models for health and readiness payloads."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ProbeStatus(str, Enum):
    """Outcome of a single dependency probe."""

    ok = "ok"
    warning = "warning"
    error = "error"


class OverallStatus(str, Enum):
    """Aggregate state reported for the service."""

    healthy = "healthy"
    ready = "ready"
    not_ready = "not_ready"

    @property
    def label(self) -> str:
        """Wire representation used by the readiness endpoint."""

        return self.value.replace("_", " ")


class ProbeResult(BaseModel):
    """Outcome of checking one dependency."""

    model_config = ConfigDict(frozen=True)

    name: str
    status: ProbeStatus
    detail: Optional[str] = None
    duration_ms: float = Field(default=0.0, ge=0.0)


class HealthReport(BaseModel):
    """Immutable aggregate of probe results at a point in time."""

    model_config = ConfigDict(frozen=True)

    overall_status: OverallStatus
    results: Tuple[ProbeResult, ...] = ()
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def checks(self) -> Dict[str, ProbeStatus]:
        return {result.name: result.status for result in self.results}

    @property
    def details(self) -> Dict[str, str]:
        return {result.name: result.detail for result in self.results if result.detail}


class WelcomeResponse(BaseModel):
    """Payload served at the service root."""

    message: str
    service: str
    version: str
    docs: str


class LivenessResponse(BaseModel):
    """Payload of the liveness endpoint."""

    status: str = Field(default=OverallStatus.healthy.value)
    timestamp: datetime
    environment: str
    version: str


class ReadinessResponse(BaseModel):
    """Itemized payload of the readiness endpoint."""

    status: str = Field(..., description="Either 'ready' or 'not ready'.")
    checks: Dict[str, ProbeStatus] = Field(default_factory=dict)
    details: Dict[str, str] | None = Field(
        default=None,
        description="Messages reported by probes, present only when a probe produced one.",
    )

    @classmethod
    def from_report(cls, report: HealthReport) -> "ReadinessResponse":
        return cls(
            status=report.overall_status.label,
            checks=report.checks,
            details=report.details or None,
        )


class ReadinessErrorResponse(BaseModel):
    """Flat payload used when the readiness evaluation itself failed."""

    status: str = Field(default=OverallStatus.not_ready.label)
    error: str
