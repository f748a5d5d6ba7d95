"""Shared dependency clients and the readiness aggregator for the application."""

from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as redis
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from servicehealth.core.config import Settings, get_settings
from servicehealth.services.health_aggregator import HealthAggregator, Probe
from servicehealth.services.probes import build_readiness_probes

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_cache_client: Optional[redis.Redis] = None
_aggregator: Optional[HealthAggregator] = None


def get_database_engine(settings: Settings | None = None) -> AsyncEngine:
    """Return the singleton async database engine."""

    global _engine
    if _engine is None:
        resolved_settings = settings or get_settings()
        _engine = create_async_engine(resolved_settings.DATABASE_URL, pool_pre_ping=True)
    return _engine


def get_cache_client(settings: Settings | None = None) -> redis.Redis:
    """Return the singleton Redis client; it connects lazily on first command."""

    global _cache_client
    if _cache_client is None:
        resolved_settings = settings or get_settings()
        _cache_client = redis.Redis.from_url(
            resolved_settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=resolved_settings.PROBE_TIMEOUT_SECONDS,
            socket_timeout=resolved_settings.PROBE_TIMEOUT_SECONDS,
        )
    return _cache_client


def get_health_aggregator_instance(settings: Settings | None = None) -> HealthAggregator:
    """Return a singleton HealthAggregator configured from settings."""

    global _aggregator
    if _aggregator is None:
        resolved_settings = settings or get_settings()
        _aggregator = HealthAggregator(
            timeout=resolved_settings.PROBE_TIMEOUT_SECONDS,
            max_concurrency=resolved_settings.PROBE_MAX_CONCURRENCY,
        )
    return _aggregator


def get_readiness_probes(settings: Settings | None = None) -> list[Probe]:
    """Build the readiness probe list over the shared clients."""

    resolved_settings = settings or get_settings()
    return build_readiness_probes(
        engine=get_database_engine(resolved_settings),
        cache_client=get_cache_client(resolved_settings),
        cache_key=resolved_settings.CACHE_HEALTH_KEY,
    )


async def close_dependency_clients() -> None:
    """Dispose the shared engine and cache client, if they were created."""

    global _engine, _cache_client
    if _engine is not None:
        await _engine.dispose()
        _engine = None
    if _cache_client is not None:
        await _cache_client.aclose()
        _cache_client = None
    logger.debug("Dependency clients closed.")
