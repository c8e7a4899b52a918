"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

import httpx
from fastapi import APIRouter, Response, status
from postgrest.exceptions import APIError
from pydantic import BaseModel

from shared.config import get_settings
from ..dependencies import get_container

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(response: Response) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Pings the entitlement store; answers 503 when it cannot be reached.
    """
    try:
        get_container().db.table("profiles").select("id").limit(1).execute()
    except (APIError, httpx.HTTPError, RuntimeError) as e:
        logger.warning(f"Readiness check failed: {e!r}")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="not_ready", database="unavailable")

    return ReadinessResponse(status="ready", database="connected")
