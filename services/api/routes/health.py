"""
Health API endpoint.

Provides:
    GET /health - Store reachability and uptime
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

import structlog

logger = structlog.get_logger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    status: str = "unknown"
    storage: str = "unknown"
    provider: str = "unknown"
    uptime_seconds: int = 0
    timestamp: str


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Get service health",
)
async def get_health() -> HealthResponse:
    """
    Report whether the stores are reachable.

    The in-memory backend is always reachable; PostgreSQL is pinged.

    Returns:
        HealthResponse: Overall status, storage state and uptime.
    """
    from services.api.app import app_state

    now = datetime.now(timezone.utc)

    if app_state.sample_store is None:
        storage = "not_initialized"
    elif app_state.postgres_client is None:
        storage = "memory"
    elif await app_state.postgres_client.ping():
        storage = "connected"
    else:
        storage = "disconnected"

    status = "healthy" if storage in ("connected", "memory") else "unhealthy"
    if status != "healthy":
        logger.warning("health_check_failed", storage=storage)

    provider = (
        app_state.price_source.provider_name
        if app_state.price_source is not None
        else "not_initialized"
    )

    return HealthResponse(
        status=status,
        storage=storage,
        provider=provider,
        uptime_seconds=int((now - app_state.start_time).total_seconds()),
        timestamp=now.isoformat().replace("+00:00", "Z"),
    )
