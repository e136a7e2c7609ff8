"""Repository port interface for the registry state.

This module defines the repository interface following hexagonal architecture principles.
"""

from abc import ABC, abstractmethod

from ..domain.models import RegistryState


class RegistryStateRepository(ABC):
    """Abstract repository for the registry aggregate.

    This is a port interface that must be implemented by infrastructure adapters.
    """

    @abstractmethod
    async def load(self) -> RegistryState | None:
        """Load the persisted state, or ``None`` if nothing was saved yet."""
        ...

    @abstractmethod
    async def save(self, state: RegistryState) -> None:
        """Persist the full state, replacing the previous one."""
        ...
