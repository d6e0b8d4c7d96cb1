"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from tracker.config import Settings
from tracker.domain.value import ProviderCapabilities

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    git_sha: str
    providers: list[str]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings],
    capabilities: FromDishka[ProviderCapabilities],
) -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status with the enabled identity providers
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        git_sha=settings.git_sha,
        providers=[p.value for p in capabilities.enabled_providers()],
    )
