"""SSE streaming infrastructure for real-time event delivery."""

from slackrelay.api.sse.events import RelayEvent
from slackrelay.api.sse.manager import event_stream
from slackrelay.api.sse.relay import EventRelay, Subscription

__all__ = [
    "EventRelay",
    "RelayEvent",
    "Subscription",
    "event_stream",
]
