"""
Service status, health and readiness endpoints.

Health checks are used by container orchestration platforms to determine
if the application should be restarted or if it can receive traffic.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from weather_booking.db.engine import check_engine_health
from weather_booking.dependencies import get_db_engine

logger = structlog.get_logger(__name__)

router = APIRouter()

SERVICE_NAME = "Booking Service"


@router.get("/")
def service_status() -> JSONResponse:
    """
    Identify the service.

    Example:
        >>> GET /
        {"service": "Booking Service", "status": "Active"}
    """
    return JSONResponse(content={"service": SERVICE_NAME, "status": "Active"})


@router.get("/health")
def health_check() -> JSONResponse:
    """
    Liveness probe endpoint.

    Returns 200 whenever the process is running; dependencies are not checked.
    """
    return JSONResponse(content={"status": "ok"})


@router.get("/ready")
def readiness_check(db_engine: Engine = Depends(get_db_engine)) -> JSONResponse:
    """
    Readiness probe endpoint.

    Returns 200 if the booking store is reachable, 503 otherwise.

    Example:
        >>> GET /ready
        {"status": "ready", "checks": {"database": "ok"}}
    """
    checks = {}

    if check_engine_health(db_engine):
        checks["database"] = "ok"
        return JSONResponse(content={"status": "ready", "checks": checks})
    else:
        logger.error("readiness_check_failed", reason="database_not_accessible")
        checks["database"] = "failed"
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "checks": checks},
        )
