"""
Tabrik Backend — Health Check Route
=====================================

What:  GET /health for monitoring and platform health probes.
How:   Reports the connection state decided at startup; it does not probe
       MongoDB again, so it answers 200 whether or not a database is attached.
Who:   Called by the hosting platform's health checks and by humans.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from tabrik.config import settings
from tabrik.database import MongoConnector, get_connector
from tabrik.schemas.responses import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    connector: MongoConnector = Depends(get_connector),
) -> HealthResponse:
    mongodb = connector.status
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        env=settings.environment,
        mongodb=mongodb,
        message=(
            "Database connected"
            if connector.is_connected
            else "Running without database (test mode)"
        ),
    )
