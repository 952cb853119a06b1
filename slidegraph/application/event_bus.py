"""
Event bus carrying import progress and results to the caller.

Subscribers receive the flat message form of each :class:`ImportEvent`
(``{"type": "progress", "percent": ..., "text": ...}``), in the order the
events were emitted. A subscriber may be a plain function or a coroutine
function; a failing subscriber is logged and never reaches the pipeline.
"""

import inspect
from collections import defaultdict
from typing import Any, Callable, Dict, List

from slidegraph.models.events import ImportEvent
from slidegraph.setup_logging import get_logger

logger = get_logger(__name__)

Subscriber = Callable[[Dict[str, Any]], Any]


class Events:
    """Event types posted during an import."""

    PROGRESS = "progress"
    COMPLETE = "complete"
    ERROR = "error"
    CANCELLED = "cancelled"

    ALL = (PROGRESS, COMPLETE, ERROR, CANCELLED)


class EventBus:
    """Delivers import events to the UI channel and any other listeners."""

    def __init__(self):
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)
        self.emitted = 0

    def subscribe(self, event_type: str, subscriber: Subscriber) -> None:
        if event_type not in Events.ALL:
            raise ValueError(f"Unknown event type: {event_type!r}")
        self._subscribers[event_type].append(subscriber)

    def subscribe_all(self, subscriber: Subscriber) -> None:
        for event_type in Events.ALL:
            self.subscribe(event_type, subscriber)

    def unsubscribe(self, event_type: str, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers[event_type]:
            self._subscribers[event_type].remove(subscriber)

    async def emit(self, event: ImportEvent) -> None:
        """Deliver ``event`` to its subscribers one after another."""
        message = event.to_message()
        self.emitted += 1
        logger.debug(f"Emitting {event.type} event")

        for subscriber in list(self._subscribers[event.type]):
            try:
                result = subscriber(message)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Subscriber failed on {event.type} event: {e}")
