"""
Event Bus.

In-process publish/subscribe between the engine and its presentation
collaborator. Everything runs on the single event-loop thread, so
delivery is synchronous and in publish order.

Subscriptions may be scoped to one note. Deleting a note drops every
subscription scoped to it so no callback outlives its note.

Usage:
    from noteboard.engine.events.bus import EventBus

    bus = EventBus()
    bus.subscribe("board.note.moved", on_moved, note_id=note.id)
    bus.subscribe("*", on_anything)
    bus.publish(NoteMoved(note_id=note.id, payload={"x": 1.0, "y": 2.0}))
    bus.unsubscribe_note(note.id)
"""

from collections.abc import Callable
from dataclasses import dataclass

from noteboard.engine.core.logging import get_logger
from noteboard.engine.events.schemas import BoardEvent

logger = get_logger(__name__)

ALL_EVENTS = "*"

Handler = Callable[[BoardEvent], None]


@dataclass(eq=False)
class Subscription:
    """A handler bound to an event type, optionally for a single note."""

    event_type: str
    handler: Handler
    note_id: str | None = None

    def matches(self, event: BoardEvent) -> bool:
        if self.event_type not in (ALL_EVENTS, event.event_type):
            return False
        return self.note_id is None or self.note_id == event.note_id


class EventBus:
    """Synchronous publish/subscribe registry."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self,
        event_type: str,
        handler: Handler,
        note_id: str | None = None,
    ) -> Subscription:
        """
        Register a handler.

        Args:
            event_type: Event type to receive, or "*" for all events
            handler: Callable invoked with the event
            note_id: Only deliver events about this note

        Returns:
            Subscription handle for unsubscribe()
        """
        subscription = Subscription(event_type, handler, note_id)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove one subscription. Returns False if it was not registered."""
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            return False
        return True

    def unsubscribe_note(self, note_id: str) -> int:
        """Drop every subscription scoped to a note. Returns how many were removed."""
        before = len(self._subscriptions)
        self._subscriptions = [s for s in self._subscriptions if s.note_id != note_id]
        removed = before - len(self._subscriptions)
        if removed:
            logger.debug(
                "Note bindings released",
                extra={"note_id": note_id, "removed": removed},
            )
        return removed

    def subscription_count(self, note_id: str | None = None) -> int:
        if note_id is None:
            return len(self._subscriptions)
        return sum(1 for s in self._subscriptions if s.note_id == note_id)

    def publish(self, event: BoardEvent) -> int:
        """
        Deliver an event to every matching handler.

        A failing handler is logged and skipped; the remaining handlers
        still run and the publisher never sees the error.

        Returns:
            Number of handlers the event was delivered to
        """
        delivered = 0
        for subscription in list(self._subscriptions):
            if not subscription.matches(event):
                continue
            try:
                subscription.handler(event)
            except Exception as exc:
                logger.error(
                    "Event handler failed",
                    extra={
                        "event_type": event.event_type,
                        "event_id": event.event_id,
                        "note_id": event.note_id,
                        "error": str(exc),
                    },
                )
                continue
            delivered += 1
        return delivered
