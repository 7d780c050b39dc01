"""In-process event relay — channel-keyed publish/subscribe registry.

The events webhook publishes into the relay and every SSE connection
subscribes to the channel it is watching. Delivery is synchronous,
best-effort and at-most-once: nothing is queued for topics without
subscribers and nothing is replayed.

The registry lives in process memory, so subscribers connected to a
different server process never see an event. Running more than one
instance requires an external broker.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

    from slackrelay.api.sse.events import RelayEvent

    EventHandler = Callable[[RelayEvent], None]

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class Subscription:
    """Handle returned by :meth:`EventRelay.subscribe`; pass it back to unsubscribe."""

    topic: str
    subscription_id: int


class EventRelay:
    """Publish/subscribe registry keyed by topic (a Slack channel id).

    Topics are created on first subscribe and dropped when their last
    subscriber leaves. Every read and write of the registry, including
    delivery, happens under one re-entrant lock: once :meth:`unsubscribe`
    returns, the handler is never called again. Handlers run while the lock
    is held and must not block; they may unsubscribe themselves.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._topics: dict[str, dict[int, EventHandler]] = {}
        self._ids = itertools.count(1)

    def subscribe(self, topic: str, handler: EventHandler) -> Subscription:
        """Register ``handler`` on ``topic`` and return its handle."""
        with self._lock:
            subscription = Subscription(topic=topic, subscription_id=next(self._ids))
            self._topics.setdefault(topic, {})[subscription.subscription_id] = handler

        logger.debug(
            "relay_subscribed",
            topic=topic,
            subscription_id=subscription.subscription_id,
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a subscriber. Returns ``False`` if it was already gone."""
        with self._lock:
            handlers = self._topics.get(subscription.topic)
            if handlers is None or handlers.pop(subscription.subscription_id, None) is None:
                return False
            if not handlers:
                del self._topics[subscription.topic]

        logger.debug(
            "relay_unsubscribed",
            topic=subscription.topic,
            subscription_id=subscription.subscription_id,
        )
        return True

    def publish(self, topic: str, event: RelayEvent) -> int:
        """Deliver ``event`` to every subscriber of ``topic`` in registration order.

        A failing handler is logged and skipped. Returns the number of
        handlers that accepted the event.
        """
        delivered = 0
        with self._lock:
            handlers = list(self._topics.get(topic, {}).items())
            for subscription_id, handler in handlers:
                # A handler earlier in this loop may have removed this one.
                if subscription_id not in self._topics.get(topic, {}):
                    continue
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "relay_delivery_failed",
                        topic=topic,
                        subscription_id=subscription_id,
                    )
                    continue
                delivered += 1

        logger.debug(
            "relay_event_published",
            topic=topic,
            subscribers=len(handlers),
            delivered=delivered,
        )
        return delivered

    @property
    def topic_count(self) -> int:
        with self._lock:
            return len(self._topics)

    def subscriber_count(self, topic: str | None = None) -> int:
        """Subscribers on ``topic``, or across all topics when omitted."""
        with self._lock:
            if topic is not None:
                return len(self._topics.get(topic, {}))
            return sum(len(handlers) for handlers in self._topics.values())
