"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP booking_operations_total Total booking operations (success and failure)
        # TYPE booking_operations_total counter
        booking_operations_total{operation="create",status="success"} 42.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """
    Return all registered metrics in Prometheus text exposition format.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
