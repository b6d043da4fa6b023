"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from jamvote.config import Settings
from jamvote.domain.service import ThemeService

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str
    timestamp: datetime
    version: str
    git_sha: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings], theme_service: FromDishka[ThemeService]
) -> HealthResponse:
    """Report service status and database connectivity.

    Always answers 200; an unreachable database shows up in the body.
    """
    connected = await theme_service.is_storage_available()
    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        database="connected" if connected else "disconnected",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
    )
