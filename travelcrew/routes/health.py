"""
Travel Crew Backend — Status & Health Routes
==============================================

What:  Root status endpoint and a dependency-aware health check.
Who:   Called by the hosting platform, uptime monitors and load balancers.

Status levels:
    - healthy:   database and asset store reachable (HTTP 200)
    - degraded:  asset store unreachable; reads still work (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response

from travelcrew import __version__
from travelcrew.schemas.common import HealthResponse, StatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_model=StatusResponse, summary="Service status")
async def root() -> StatusResponse:
    return StatusResponse(status="OK", message="Yala Travel Crew Backend is running")


@router.get(
    "/api/health",
    response_model=HealthResponse,
    summary="Service health check",
    description=(
        "Returns the health status of the backend and its dependencies: "
        "the document store (SELECT 1) and the asset store (ping)."
    ),
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    db_status = "connected"
    asset_status = "available"
    overall = "healthy"

    if not await request.app.state.document_store.ping():
        db_status = "disconnected"
        overall = "unhealthy"

    try:
        if not await request.app.state.asset_store.health_check():
            asset_status = "unavailable"
    except Exception as e:
        asset_status = "unavailable"
        logger.warning("Health check: asset store unreachable: %s", str(e))
    if asset_status != "available" and overall == "healthy":
        overall = "degraded"

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        asset_store=asset_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
