"""SSE streaming endpoint.

Endpoint:
    GET /api/slack/stream?channel=<id>   — Live messages for one channel
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from slackrelay.api.sse.dependencies import get_relay
from slackrelay.api.sse.manager import SSE_HEADERS, event_stream
from slackrelay.api.sse.relay import EventRelay
from slackrelay.core.exceptions import ValidationError

logger = structlog.get_logger()

router = APIRouter(prefix="/api/slack", tags=["slack-stream"])

RelayDep = Annotated[EventRelay, Depends(get_relay)]


@router.get("/stream")
async def channel_stream(relay: RelayDep, channel: str | None = None) -> StreamingResponse:
    """SSE stream of messages posted to ``channel``."""
    if not channel:
        raise ValidationError("Bad Request: Channel ID is required.")

    logger.info("sse_channel_stream_requested", channel=channel)

    return StreamingResponse(
        event_stream(relay, channel),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
