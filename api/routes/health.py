"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.config import get_settings

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
    auth: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check endpoint.

    Reports whether Supabase and session verification are configured.
    Returns 503 when the database is not.
    """
    settings = get_settings()
    database = "configured" if settings.supabase_url and settings.supabase_service_role_key else "missing"
    auth = "configured" if settings.supabase_jwt_secret else "missing"

    body = ReadinessResponse(
        status="ready" if database == "configured" else "not_ready",
        database=database,
        auth=auth,
    )
    if database != "configured":
        logger.warning("Readiness check failed: Supabase is not configured")
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
