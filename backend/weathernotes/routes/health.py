"""
WeatherNotes — Health Check Route
==================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs `SELECT 1` against the database and reports whether a weather API
       key is configured. The weather API itself is not called: every probe
       would spend quota.

Status levels:
    - healthy:   database reachable, weather configured (HTTP 200)
    - degraded:  database reachable, weather unconfigured (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from weathernotes import __version__
from weathernotes.database import engine
from weathernotes.schemas.health import HealthResponse
from weathernotes.services.weather_service import weather_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check():
    db_status = "connected"
    weather_status = "configured"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if not weather_service.is_configured:
        weather_status = "unconfigured"
        if overall != "unhealthy":
            overall = "degraded"

    body = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        weather=weather_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=503 if overall == "unhealthy" else 200,
        content=body.model_dump(),
    )
