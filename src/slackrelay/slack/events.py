"""Dispatch of verified Slack Events API payloads.

Two envelope shapes matter:

* ``url_verification`` — the one-time handshake; the ``challenge`` token is
  echoed back verbatim.
* ``event_callback`` — a workspace event. Plain user messages (``type ==
  "message"`` with no ``subtype``) are published on the relay under their
  channel id. Edits, joins, bot posts and every other event are dropped.

Any other envelope is acknowledged and dropped.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog

from slackrelay.api.sse.events import RelayEvent
from slackrelay.core.exceptions import ValidationError

if TYPE_CHECKING:
    from slackrelay.api.sse.relay import EventRelay

logger = structlog.get_logger()

ACK_BODY = "OK"


def parse_payload(body: bytes) -> dict[str, Any]:
    """Decode a webhook body, which must be a JSON object."""
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise ValidationError("Request body is not valid JSON.") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload


def dispatch_payload(payload: dict[str, Any], relay: EventRelay) -> str:
    """Handle a verified payload and return the plain-text response body."""
    envelope_type = payload.get("type")

    if envelope_type == "url_verification":
        logger.info("slack_url_verification")
        return str(payload.get("challenge", ""))

    if envelope_type == "event_callback":
        event = payload.get("event")
        if isinstance(event, dict):
            _dispatch_event(event, relay)
        else:
            logger.info("slack_event_callback_without_event")
        return ACK_BODY

    logger.info("slack_envelope_ignored", envelope_type=envelope_type)
    return ACK_BODY


def _dispatch_event(event: dict[str, Any], relay: EventRelay) -> None:
    event_type = event.get("type")
    subtype = event.get("subtype")
    channel = event.get("channel")

    if event_type != "message" or subtype:
        logger.info("slack_event_ignored", event_type=event_type, subtype=subtype)
        return
    if not channel:
        logger.info("slack_message_without_channel")
        return

    delivered = relay.publish(str(channel), RelayEvent.from_slack_event(event))
    logger.info("slack_message_relayed", channel=channel, delivered=delivered)
