"""Central FastAPI router wiring all API endpoints."""

from fastapi import APIRouter

from servicehealth.api.routes import health, welcome


api_router = APIRouter()
api_router.include_router(welcome.router)
api_router.include_router(health.router)
