"""File-backed RegistryStateRepository using MessagePack."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

from ..domain.exceptions import StateStorageError
from ..domain.models import RegistryState
from ..ports.repository import RegistryStateRepository
from .serialization import detect_and_deserialize_state, serialize_state_to_msgpack


class MsgpackFileStateRepository(RegistryStateRepository):
    """Persists the whole state to a single file.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers see either the old or the new state, never a
    partial one.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> RegistryState | None:
        return await asyncio.to_thread(self._load_sync)

    async def save(self, state: RegistryState) -> None:
        payload = serialize_state_to_msgpack(state)
        await asyncio.to_thread(self._write_sync, payload)

    def _load_sync(self) -> RegistryState | None:
        try:
            data = self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StateStorageError(f"Failed to read state: {e}", location=str(self._path)) from e
        return detect_and_deserialize_state(data)

    def _write_sync(self, payload: bytes) -> None:
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=directory)
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(payload)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StateStorageError(f"Failed to write state: {e}", location=str(self._path)) from e
