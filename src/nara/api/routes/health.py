"""Health check endpoints."""

from fastapi import APIRouter

from nara.api.schemas import HealthResponse, RootResponse
from nara.config import settings

router = APIRouter()


@router.get("/", response_model=RootResponse)
async def root() -> RootResponse:
    return RootResponse(status=200, message=f"Hello World {settings.app_name}")


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return the health status of the application."""
    from nara import __version__

    return HealthResponse(status="healthy", version=__version__)
