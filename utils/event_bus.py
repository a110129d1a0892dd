"""
Simple asynchronous event bus for network events.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from models.events import NetworkEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[NetworkEvent], Coroutine[Any, Any, None]]

# Subscribing under this key receives every event type
ALL_EVENTS = "*"


class EventBus:
    """Fans committed-transaction events out to async subscribers."""

    def __init__(self):
        self.subscribers: dict[str, list[EventHandler]] = {}

    def subscribe(self, event_type: str, callback: EventHandler) -> None:
        """Subscribe to an event type, or to ALL_EVENTS."""
        if not callable(callback):
            raise TypeError("Callback must be a callable async function.")
        handlers = self.subscribers.setdefault(event_type, [])
        if callback in handlers:
            logger.warning(f"Callback {_name(callback)} already subscribed to {event_type}")
            return
        handlers.append(callback)
        logger.debug(f"Callback {_name(callback)} subscribed to {event_type}")

    def unsubscribe(self, event_type: str, callback: EventHandler) -> None:
        handlers = self.subscribers.get(event_type)
        if not handlers or callback not in handlers:
            logger.warning(f"Callback {_name(callback)} not found for event type {event_type}")
            return
        handlers.remove(callback)
        if not handlers:
            del self.subscribers[event_type]
        logger.debug(f"Callback {_name(callback)} unsubscribed from {event_type}")

    async def publish(self, event: NetworkEvent) -> None:
        """
        Deliver an event to its subscribers concurrently.
        A failing subscriber is logged and does not affect the others.
        """
        if not isinstance(event, NetworkEvent):
            raise TypeError(f"Cannot publish {type(event).__name__}; expected NetworkEvent.")

        logger.info(f"Event published: {event.event_type} for transaction {event.transaction_id}")
        handlers = list(self.subscribers.get(event.event_type, [])) + list(self.subscribers.get(ALL_EVENTS, []))
        if not handlers:
            return
        results = await asyncio.gather(*(handler(event) for handler in handlers), return_exceptions=True)
        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(f"Error in subscriber callback '{_name(handler)}' for event {event.event_type}: {result}")


def _name(callback: Any) -> str:
    return getattr(callback, "__name__", repr(callback))
