"""
Registros API - Health Check Route
===================================

What:  Health check endpoint for monitoring and container probes.
How:   Runs `SELECT 1` through the RecordStore and reports the result.

Status levels:
    - healthy:   database answers (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from registros import __version__
from registros.dependencies import get_record_store
from registros.schemas.record import HealthResponse
from registros.services.record_store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(
    response: Response,
    store: RecordStore = Depends(get_record_store),
) -> HealthResponse:
    """Probe the database and report aggregate status with uptime."""
    if await store.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
