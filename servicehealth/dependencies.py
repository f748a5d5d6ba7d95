"""Shared dependency injections for FastAPI routes."""

from collections.abc import Iterator
from functools import partial
from typing import Annotated, Callable

from fastapi import Depends

from servicehealth.core.config import Settings, get_settings
from servicehealth.services.health_aggregator import HealthAggregator, Probe
from servicehealth.services.probe_registry import get_health_aggregator_instance, get_readiness_probes

ProbeFactory = Callable[[], list[Probe]]


def get_app_settings() -> Settings:
    """Provide application settings."""

    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


def get_health_aggregator(settings: SettingsDep) -> Iterator[HealthAggregator]:
    """Provide the shared health aggregator for request handlers."""

    aggregator = get_health_aggregator_instance(settings=settings)
    yield aggregator


HealthAggregatorDep = Annotated[HealthAggregator, Depends(get_health_aggregator)]


def get_probe_factory(settings: SettingsDep) -> ProbeFactory:
    """Provide a callable assembling the readiness probes.

    Assembly is deferred to the handler so that client construction errors
    are reported through the readiness payload instead of a 500.
    """

    return partial(get_readiness_probes, settings=settings)


ProbeFactoryDep = Annotated[ProbeFactory, Depends(get_probe_factory)]
