"""Application lifecycle hooks."""

import logging

from fastapi import FastAPI

from servicehealth.core.config import get_settings
from servicehealth.services.probe_registry import close_dependency_clients, get_cache_client
from servicehealth.services.probes import warm_cache

logger = logging.getLogger(__name__)


def register_startup_event(app: FastAPI) -> None:
    """Register startup handlers."""

    @app.on_event("startup")
    async def on_startup() -> None:
        settings = get_settings()
        logger.info("Starting %s in %s environment.", settings.APP_NAME, settings.ENVIRONMENT)

        if not settings.CACHE_WARM_ON_STARTUP:
            return
        try:
            await warm_cache(
                get_cache_client(settings),
                settings.CACHE_HEALTH_KEY,
                settings.CACHE_HEALTH_TTL_SECONDS,
            )
        except Exception as exc:  # noqa: BLE001 - readiness reports the cache state
            logger.warning("Could not populate cache health key: %s", exc)


def register_shutdown_event(app: FastAPI) -> None:
    """Register shutdown handlers."""

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        logger.info("Shutting down %s.", get_settings().APP_NAME)
        await close_dependency_clients()
