"""In-memory implementation of the RegistryStateRepository.

This is an infrastructure adapter that implements the repository port
for testing and development purposes.
"""

from ..domain.models import RegistryState
from ..ports.repository import RegistryStateRepository


class InMemoryStateRepository(RegistryStateRepository):
    """Keeps a private deep copy of the last saved state."""

    def __init__(self, initial: RegistryState | None = None) -> None:
        self._state = initial.working_copy() if initial else None
        self.save_count = 0

    async def load(self) -> RegistryState | None:
        return self._state.working_copy() if self._state else None

    async def save(self, state: RegistryState) -> None:
        self._state = state.working_copy()
        self.save_count += 1

    def clear(self) -> None:
        """Forget the stored state (useful for testing)."""
        self._state = None
