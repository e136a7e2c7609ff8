"""Event publisher port for committed registry transitions."""

from abc import ABC, abstractmethod

from ..domain.events import DomainEvent


class EventPublisherPort(ABC):
    """Abstract sink for domain events.

    Events are handed over only after the transition that produced them
    has been committed.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """Publish a single domain event."""
        ...
