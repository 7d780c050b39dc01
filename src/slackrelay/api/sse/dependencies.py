"""FastAPI dependencies for SSE endpoints."""

from __future__ import annotations

from fastapi import Request

from slackrelay.api.sse.relay import EventRelay


def get_relay(request: Request) -> EventRelay:
    """Return the relay created by the application factory."""
    relay: EventRelay = request.app.state.relay
    return relay
