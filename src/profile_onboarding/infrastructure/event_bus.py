"""In-process pub-sub for onboarding events.

``ConversationOrchestrator`` publishes the events collected while processing a
turn on an optional ``EventBus``.  Subscribers (analytics, audit trails, UIs)
are isolated from each other: a subscriber that raises is logged and the
remaining subscribers still run, so a broken listener can never break a turn.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence

from profile_onboarding.domain.events import DomainEvent

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


class EventBus:
    """Thread-safe synchronous event dispatcher.

    Catch-all handlers run first, then handlers registered for the exact
    event class, each group in registration order::

        bus = EventBus()
        bus.subscribe(ProfileReady, notify_generator)
        bus.subscribe_all(audit_log.append)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._typed: dict[type[DomainEvent], list[Handler]] = defaultdict(list)
        self._catch_all: list[Handler] = []

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        """Call *handler* for every published *event_type* instance."""
        with self._lock:
            self._typed[event_type].append(handler)

    def subscribe_all(self, handler: Handler) -> None:
        """Call *handler* for every published event."""
        with self._lock:
            self._catch_all.append(handler)

    def unsubscribe(self, event_type: type[DomainEvent], handler: Handler) -> bool:
        """Drop *handler* from *event_type*; ``False`` if it was not registered."""
        with self._lock:
            handlers = self._typed.get(event_type)
            if not handlers or handler not in handlers:
                return False
            handlers.remove(handler)
            return True

    def publish(self, event: DomainEvent) -> None:
        with self._lock:
            handlers = [*self._catch_all, *self._typed.get(type(event), ())]

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Event handler %r failed on %s", handler, type(event).__name__
                )

    def publish_many(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    def handler_count(self, event_type: type[DomainEvent] | None = None) -> int:
        with self._lock:
            if event_type is not None:
                return len(self._typed.get(event_type, ()))
            return len(self._catch_all) + sum(len(h) for h in self._typed.values())

    def clear(self) -> None:
        with self._lock:
            self._typed.clear()
            self._catch_all.clear()


class EventStore:
    """Append-only, in-memory record of published events.

    Wire it to a bus with ``bus.subscribe_all(store.append)`` to keep a
    transcript of every conversation for replay or debugging.

    Parameters
    ----------
    max_size:
        Keep at most this many events, dropping the oldest.  ``0`` keeps all.
    """

    def __init__(self, max_size: int = 0) -> None:
        if max_size < 0:
            raise ValueError(f"max_size must be >= 0, got {max_size}")
        self._events: list[DomainEvent] = []
        self._max_size = max_size
        self._lock = threading.Lock()

    def append(self, event: DomainEvent) -> None:
        with self._lock:
            self._events.append(event)
            if self._max_size and len(self._events) > self._max_size:
                del self._events[: len(self._events) - self._max_size]

    def query(
        self,
        event_type: type[DomainEvent] | None = None,
        source_id: str | None = None,
    ) -> Sequence[DomainEvent]:
        """Events of *event_type* (subclasses included) from *source_id*, oldest first."""
        with self._lock:
            events = list(self._events)
        if event_type is not None:
            events = [e for e in events if isinstance(e, event_type)]
        if source_id is not None:
            events = [e for e in events if e.source_id == source_id]
        return events

    @property
    def latest(self) -> DomainEvent | None:
        with self._lock:
            return self._events[-1] if self._events else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
