"""
HTMX Todos: Health Check Route
================================

What:  Health check endpoint for container probes and load balancers.
How:   Runs `SELECT 1` through the process's Database handle.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from htmx_todo import __version__
from htmx_todo.database import Database
from htmx_todo.schemas.todo import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Uptime reference, set once at import
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    """
    Probe the database and report aggregate status.

    Returns:
        HealthResponse; served with 503 when the database is down.
    """
    database: Database = request.app.state.database
    db_status = "connected"
    overall = "healthy"

    try:
        await database.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    health = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if overall == "unhealthy":
        return JSONResponse(status_code=503, content=health.model_dump())
    return health
