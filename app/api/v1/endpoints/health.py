"""Health check endpoint. Liveness has no dependencies; readiness pings the database."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.domain.exceptions import SqlNotConfiguredException
from app.infrastructure.persistence.database import ping_database
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Not ready (database unreachable or not configured)", "model": ReadinessErrorResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 if the database answers; 503 otherwise.

    Permission resolution needs the database on every cache miss, so the
    instance is not ready without it.
    """
    try:
        await ping_database()
    except SqlNotConfiguredException as e:
        return _not_ready(e.message)
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Readiness check failed: %s", e)
        return _not_ready("Database unreachable")
    cache = getattr(request.app.state, "permission_cache", None)
    return ReadinessResponse(permission_cache_entries=len(cache) if cache is not None else 0)


def _not_ready(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(status="not_ready", message=message).model_dump(),
    )
