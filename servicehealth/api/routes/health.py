"""Health and readiness routes."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from servicehealth.dependencies import HealthAggregatorDep, ProbeFactoryDep, SettingsDep
from servicehealth.errors import AggregatorFailure
from servicehealth.schemas.health import (
    LivenessResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)
from servicehealth.services.health_aggregator import describe_exception, evaluate_liveness, status_code_for

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _not_ready(message: str) -> JSONResponse:
    payload = ReadinessErrorResponse(error=message)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=payload.model_dump(mode="json"),
    )


@router.get("/health", response_model=LivenessResponse, summary="Liveness probe")
async def health_check(settings: SettingsDep) -> LivenessResponse:
    """Return a heartbeat payload; never consults external dependencies."""

    report = evaluate_liveness()
    return LivenessResponse(
        status=report.overall_status.value,
        timestamp=report.timestamp,
        environment=settings.ENVIRONMENT,
        version=settings.APP_VERSION,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={
        status.HTTP_503_SERVICE_UNAVAILABLE: {
            "description": "A required dependency is failing or readiness could not be evaluated.",
        }
    },
)
async def readiness_check(aggregator: HealthAggregatorDep, build_probes: ProbeFactoryDep) -> JSONResponse:
    """Probe the database and cache and report whether traffic can be served."""

    try:
        probes = build_probes()
    except Exception as exc:  # noqa: BLE001 - degraded to the flat 503 payload
        logger.exception("Failed to assemble readiness probes.")
        return _not_ready(describe_exception(exc))

    try:
        report = await aggregator.evaluate(probes)
    except AggregatorFailure as exc:
        return _not_ready(str(exc))

    payload = ReadinessResponse.from_report(report)
    return JSONResponse(
        status_code=status_code_for(report),
        content=payload.model_dump(mode="json", exclude_none=True),
    )
