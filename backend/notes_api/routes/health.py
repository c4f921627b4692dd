"""
Notes API — Health Check Route
===============================

What:  Liveness endpoint at GET /api/healthchecker.
Why:   Load balancers and docker-compose health checks need a cheap liveness check.
How:   Always answers 200 while the process is serving; the `database`
       field reports whether a SELECT 1 through the request's session
       succeeded, so monitoring can tell "up" from "up but cut off".
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api import __version__
from notes_api.database import get_db_session
from notes_api.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])

HEALTH_MESSAGE = "Notes CRUD API with FastAPI and SQLAlchemy"

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/healthchecker",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(session: AsyncSession = Depends(get_db_session)) -> HealthResponse:
    db_status = "connected"
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status="success",
        message=HEALTH_MESSAGE,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
