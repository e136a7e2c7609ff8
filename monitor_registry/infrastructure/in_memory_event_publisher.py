"""In-memory event publisher.

Keeps published domain events in order for inspection.
"""

from ..domain.events import DomainEvent
from ..ports.event_publisher import EventPublisherPort


class InMemoryEventPublisher(EventPublisherPort):
    """Collects events in publication order."""

    def __init__(self) -> None:
        self._events: list[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> list[DomainEvent]:
        return list(self._events)

    def of_type(self, event_type: str) -> list[DomainEvent]:
        """Events whose ``event_type`` matches."""
        return [event for event in self._events if event.event_type == event_type]

    def clear(self) -> None:
        self._events.clear()
