"""SSE connection manager — subscribes to the relay and streams to clients.

Handles:
- Relay subscription per connection
- ``data: <json>`` framing
- Unsubscribing on disconnect
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from slackrelay.api.sse.events import RelayEvent
    from slackrelay.api.sse.relay import EventRelay

logger = structlog.get_logger()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def format_sse(data: str) -> str:
    """Format a single SSE frame.

    There is no ``id:`` or ``event:`` line, so every frame reaches the
    browser's ``EventSource.onmessage`` handler.
    """
    return f"data: {data}\n\n"


async def event_stream(relay: EventRelay, topic: str) -> AsyncGenerator[str, None]:
    """Async generator that yields SSE-formatted strings for ``topic``.

    The relay may publish from any thread, so frames are handed to this
    generator's event loop with ``call_soon_threadsafe``. The subscription
    is removed exactly once, when the transport cancels the stream or the
    caller closes the generator.

    The caller (FastAPI StreamingResponse) iterates this generator.
    """
    loop = asyncio.get_running_loop()
    frames: asyncio.Queue[str] = asyncio.Queue()

    def deliver(event: RelayEvent) -> None:
        loop.call_soon_threadsafe(frames.put_nowait, format_sse(event.to_json()))

    subscription = relay.subscribe(topic, deliver)
    log = logger.bind(channel=topic, subscription_id=subscription.subscription_id)
    log.info("sse_client_connected")

    try:
        while True:
            yield await frames.get()
    except asyncio.CancelledError:
        log.info("sse_client_disconnected")
        raise
    finally:
        relay.unsubscribe(subscription)
