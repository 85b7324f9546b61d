"""
TaskTrack Backend - Health Check Route
======================================

What:  GET /health for container health checks and load balancer probes.
How:   Runs SELECT 1 through the application's Database handle.

    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 200, status field says so)
"""

import logging
import time

from fastapi import APIRouter, Request

from tasktrack import __version__
from tasktrack.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    connected = await request.app.state.db.ping()

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
