"""FastAPI application entrypoint."""

from fastapi import FastAPI

from servicehealth.api.router import api_router
from servicehealth.core.config import settings
from servicehealth.core.logging import configure_logging
from servicehealth.events import register_shutdown_event, register_startup_event


def create_application() -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=settings.DESCRIPTION,
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
    )

    # Probes stay at the root where container orchestrators expect them.
    app.include_router(api_router)

    register_startup_event(app)
    register_shutdown_event(app)

    return app


app = create_application()
