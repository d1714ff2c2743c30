"""Liveness plus database reachability, mounted outside the API prefix."""

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.core.config import settings
from app.core.database import db_client
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="healthy, or degraded when the database is unreachable")
    version: str
    service: str
    database: str = Field(..., description="Database status")
    database_latency_ms: Optional[float] = None


@router.get(
    "",
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    description="Service liveness and database reachability",
    operation_id="get_service_health_status",
)
async def health_check() -> HealthCheckResponse:
    db_health = await db_client.health_check()
    healthy = db_health["status"] == "healthy"
    if not healthy:
        LOGGER.warning("Health check degraded", extra={"database": db_health})

    return HealthCheckResponse(
        status="healthy" if healthy else "degraded",
        version=settings.app_version,
        service=settings.app_name,
        database=db_health["status"],
        database_latency_ms=db_health.get("latency_ms"),
    )
