"""Health check route."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from slackrelay import __version__
from slackrelay.api.sse.dependencies import get_relay
from slackrelay.api.sse.relay import EventRelay
from slackrelay.core.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/api/health", response_model=HealthResponse)
async def health_check(relay: Annotated[EventRelay, Depends(get_relay)]) -> HealthResponse:
    """Simple health check — no auth required. Reports relay occupancy."""
    return HealthResponse(
        status="ok",
        version=__version__,
        topics=relay.topic_count,
        subscribers=relay.subscriber_count(),
    )
