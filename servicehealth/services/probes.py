"""Dependency probes used by the readiness check."""

from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from servicehealth.errors import ProbeAdvisory
from servicehealth.services.health_aggregator import Probe

logger = logging.getLogger(__name__)

DATABASE_PROBE = "database"
CACHE_PROBE = "cache"


class DatabaseProbe:
    """Acquire a live connection from the engine and validate it."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def __call__(self) -> None:
        async with self._engine.connect() as connection:
            await connection.execute(text("SELECT 1"))


class CacheProbe:
    """Check that the well-known health key is populated in the cache.

    A missing key only degrades readiness to a warning; connection errors
    propagate and are reported as failures.
    """

    def __init__(self, client: redis.Redis, key: str) -> None:
        self._client = client
        self._key = key

    async def __call__(self) -> None:
        value = await self._client.get(self._key)
        if value is None:
            raise ProbeAdvisory(f"Cache key '{self._key}' is not populated.")


def build_readiness_probes(engine: AsyncEngine, cache_client: redis.Redis, cache_key: str) -> list[Probe]:
    """Return the readiness probes in reporting order."""

    return [
        (DATABASE_PROBE, DatabaseProbe(engine)),
        (CACHE_PROBE, CacheProbe(cache_client, cache_key)),
    ]


async def warm_cache(client: redis.Redis, key: str, ttl_seconds: Optional[int] = None) -> None:
    """Populate the health key so the cache probe reports ``ok``."""

    await client.set(key, "ok", ex=ttl_seconds)
    logger.info("Populated cache health key %s.", key)
