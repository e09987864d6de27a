"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, status
from pydantic import BaseModel

from onlyfacts.config import Settings
from onlyfacts.interface.error import storage_unavailable
from onlyfacts.persistence.connection import ConnectionState, DatabaseConnection

router = APIRouter(prefix="/health", tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    git_sha: str
    storage: ConnectionState


@router.get("", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings],
    connection: FromDishka[DatabaseConnection],
) -> HealthResponse:
    """Liveness check; always 200 while the process is serving.

    Returns:
        Service status, including the storage connection state
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
        storage=connection.state,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check(
    connection: FromDishka[DatabaseConnection],
) -> dict[str, str]:
    """Readiness check; 503 until storage is connected.

    Raises:
        HTTPException: 503 if storage is not ready
    """
    if not connection.is_ready:
        raise storage_unavailable(f"Storage is {connection.state.value}")
    return {"status": "ready"}
