"""Aggregate dependency probes into a single health report."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

from fastapi import status

from servicehealth.errors import AggregatorFailure, ProbeAdvisory, ProbeFailure, ProbeTimeout
from servicehealth.schemas.health import HealthReport, OverallStatus, ProbeResult, ProbeStatus

logger = logging.getLogger(__name__)

ProbeFunction = Callable[[], Any]
Probe = Tuple[str, ProbeFunction]

_STATUS_CODES = {
    OverallStatus.healthy: status.HTTP_200_OK,
    OverallStatus.ready: status.HTTP_200_OK,
    OverallStatus.not_ready: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_LOG_LEVELS = {
    ProbeStatus.ok: logging.DEBUG,
    ProbeStatus.warning: logging.INFO,
    ProbeStatus.error: logging.WARNING,
}


def evaluate_liveness() -> HealthReport:
    """Report process liveness without consulting any dependency."""

    return HealthReport(overall_status=OverallStatus.healthy)


def derive_overall_status(results: Iterable[ProbeResult]) -> OverallStatus:
    """Reduce per-probe statuses into the readiness verdict."""

    if any(result.status is ProbeStatus.error for result in results):
        return OverallStatus.not_ready
    return OverallStatus.ready


def status_code_for(report: HealthReport) -> int:
    """Map a report onto the HTTP status code that accompanies it."""

    return _STATUS_CODES[report.overall_status]


def describe_exception(exc: BaseException) -> str:
    """Return the exception message, or its type name when the message is empty."""

    message = str(exc).strip()
    return message or type(exc).__name__


def _is_async_callable(probe: ProbeFunction) -> bool:
    return inspect.iscoroutinefunction(probe) or inspect.iscoroutinefunction(
        getattr(probe, "__call__", None)
    )


class HealthAggregator:
    """Run named dependency probes and collect their outcomes.

    Each probe is a zero-argument callable. Coroutine functions are awaited,
    plain callables run in a worker thread. A probe that returns is ``ok`` (a
    returned string is kept as its detail), one raising
    :class:`~servicehealth.errors.ProbeAdvisory` is ``warning`` and any other
    exception, including exceeding ``timeout`` seconds, is ``error``. Probe
    failures never escape :meth:`evaluate`; only problems with the
    aggregation itself surface, as :class:`~servicehealth.errors.AggregatorFailure`.
    """

    def __init__(self, timeout: float = 2.0, max_concurrency: int = 4) -> None:
        if timeout <= 0:
            raise ValueError("Probe timeout must be positive.")
        if max_concurrency < 1:
            raise ValueError("Probe concurrency must be at least 1.")
        self._timeout = timeout
        self._max_concurrency = max_concurrency

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    async def evaluate(self, probes: Sequence[Probe]) -> HealthReport:
        """Execute every probe once and build the readiness report."""

        registered = self._validate(probes)
        try:
            semaphore = asyncio.Semaphore(self._max_concurrency)
            # gather keeps argument order, so results follow registration order.
            results = await asyncio.gather(
                *(self._run_probe(name, probe, semaphore) for name, probe in registered)
            )
            report = HealthReport(
                overall_status=derive_overall_status(results),
                results=tuple(results),
            )
        except Exception as exc:
            logger.exception("Readiness aggregation failed.")
            raise AggregatorFailure(describe_exception(exc)) from exc

        logger.debug(
            "Readiness evaluated as %s over %d probe(s).",
            report.overall_status.value,
            len(report.results),
        )
        return report

    def evaluate_liveness(self) -> HealthReport:
        """Report process liveness; never runs probes."""

        return evaluate_liveness()

    def _validate(self, probes: Sequence[Probe]) -> list[Probe]:
        try:
            entries = list(probes)
        except TypeError as exc:
            raise AggregatorFailure("Probe set is not iterable.") from exc

        registered: list[Probe] = []
        seen: set[str] = set()
        for entry in entries:
            try:
                name, probe = entry
            except (TypeError, ValueError) as exc:
                raise AggregatorFailure(f"Invalid probe entry: {entry!r}") from exc
            if not isinstance(name, str) or not name.strip():
                raise AggregatorFailure(f"Probe name must be a non-empty string, got {name!r}.")
            if not callable(probe):
                raise AggregatorFailure(f"Probe '{name}' is not callable.")
            if name in seen:
                raise AggregatorFailure(f"Duplicate probe name '{name}'.")
            seen.add(name)
            registered.append((name, probe))
        return registered

    async def _run_probe(
        self,
        name: str,
        probe: ProbeFunction,
        semaphore: asyncio.Semaphore,
    ) -> ProbeResult:
        async with semaphore:
            started = time.perf_counter()
            detail: Optional[str]
            try:
                outcome = await self._invoke_with_timeout(probe)
            except ProbeAdvisory as advisory:
                probe_status, detail = ProbeStatus.warning, describe_exception(advisory)
            except ProbeTimeout as timeout:
                probe_status, detail = ProbeStatus.error, describe_exception(timeout)
                logger.warning("Probe %s timed out after %.2fs.", name, timeout.timeout)
            except Exception as exc:  # noqa: BLE001 - reported as the probe's status
                probe_status, detail = ProbeStatus.error, describe_exception(exc)
                logger.debug("Probe %s failure details.", name, exc_info=True)
            else:
                probe_status = ProbeStatus.ok
                detail = outcome if isinstance(outcome, str) and outcome else None
            elapsed_ms = (time.perf_counter() - started) * 1000.0

        log_level = _LOG_LEVELS[probe_status]
        if detail:
            logger.log(log_level, "Probe %s finished %s in %.1fms: %s", name, probe_status.value, elapsed_ms, detail)
        else:
            logger.log(log_level, "Probe %s finished %s in %.1fms.", name, probe_status.value, elapsed_ms)
        return ProbeResult(name=name, status=probe_status, detail=detail, duration_ms=elapsed_ms)

    async def _invoke_with_timeout(self, probe: ProbeFunction) -> Any:
        try:
            return await asyncio.wait_for(self._invoke(probe), timeout=self._timeout)
        except asyncio.TimeoutError:
            # Probe-raised TimeoutErrors are rewrapped in _invoke; this is wait_for expiring.
            raise ProbeTimeout(self._timeout) from None

    @staticmethod
    async def _invoke(probe: ProbeFunction) -> Any:
        try:
            if _is_async_callable(probe):
                return await probe()

            outcome = await asyncio.to_thread(probe)
            if inspect.isawaitable(outcome):
                return await outcome
            return outcome
        except (TimeoutError, asyncio.TimeoutError) as exc:
            raise ProbeFailure(describe_exception(exc)) from exc
