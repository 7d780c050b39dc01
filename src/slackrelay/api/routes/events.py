"""Slack Events API webhook.

Endpoint:
    POST /api/slack/events   — Signed event delivery from Slack
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from slackrelay.api.sse.dependencies import get_relay
from slackrelay.api.sse.relay import EventRelay
from slackrelay.core.config import settings
from slackrelay.slack.events import dispatch_payload, parse_payload
from slackrelay.slack.signature import SIGNATURE_HEADER, TIMESTAMP_HEADER, verify_slack_request

logger = structlog.get_logger()

router = APIRouter(prefix="/api/slack", tags=["slack-events"])

RelayDep = Annotated[EventRelay, Depends(get_relay)]


@router.post("/events", response_class=PlainTextResponse)
async def slack_events(request: Request, relay: RelayDep) -> PlainTextResponse:
    """Verify a Slack request and relay plain messages to SSE subscribers.

    Auth failures return 400/403. Once verified, Slack always gets a 200 so
    that it does not retry events this app chooses to drop.
    """
    body = await request.body()
    verify_slack_request(
        body,
        request.headers.get(SIGNATURE_HEADER),
        request.headers.get(TIMESTAMP_HEADER),
        settings.slack_signing_secret,
        tolerance_seconds=settings.slack_signature_tolerance_seconds,
    )

    payload = parse_payload(body)
    logger.debug("slack_event_received", envelope_type=payload.get("type"))
    return PlainTextResponse(dispatch_payload(payload, relay))
