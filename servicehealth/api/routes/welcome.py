"""Service root route."""

from fastapi import APIRouter

from servicehealth.dependencies import SettingsDep
from servicehealth.schemas.health import WelcomeResponse

router = APIRouter(tags=["welcome"])


@router.get("/", response_model=WelcomeResponse, summary="Welcome page")
async def welcome(settings: SettingsDep) -> WelcomeResponse:
    """Greet visitors and point them at the API documentation."""

    return WelcomeResponse(
        message=f"Welcome to {settings.APP_NAME}.",
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        docs=f"{settings.API_PREFIX}/docs",
    )
