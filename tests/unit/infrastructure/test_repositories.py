"""Tests for registry state repositories."""

import pytest

from monitor_registry.domain.exceptions import StateStorageError
from monitor_registry.domain.models import RegistryState
from monitor_registry.domain.value_objects import Principal
from monitor_registry.infrastructure.file_repository import MsgpackFileStateRepository
from monitor_registry.infrastructure.in_memory_repository import InMemoryStateRepository
from monitor_registry.infrastructure.serialization import serialize_state_to_json
from tests.builders import make_principal


@pytest.fixture
def state():
    return RegistryState(
        privileged_owner=Principal(value=make_principal(1, "P")),
        subscription_duration=100,
        subscription_fee=1000,
    )


class TestInMemoryStateRepository:
    """Test cases for InMemoryStateRepository."""

    @pytest.mark.asyncio
    async def test_empty_repository(self):
        assert await InMemoryStateRepository().load() is None

    @pytest.mark.asyncio
    async def test_save_and_load(self, state):
        repository = InMemoryStateRepository()

        await repository.save(state)

        assert await repository.load() == state
        assert repository.save_count == 1

    @pytest.mark.asyncio
    async def test_stored_state_is_isolated(self, state):
        """Test that neither the saved nor the loaded object aliases the stored copy."""
        repository = InMemoryStateRepository(state)

        state.last_id = 5
        loaded = await repository.load()
        loaded.last_id = 6

        assert (await repository.load()).last_id == 0

    @pytest.mark.asyncio
    async def test_clear(self, state):
        repository = InMemoryStateRepository(state)
        repository.clear()
        assert await repository.load() is None


class TestMsgpackFileStateRepository:
    """Test cases for MsgpackFileStateRepository."""

    @pytest.mark.asyncio
    async def test_missing_file_loads_none(self, tmp_path):
        repository = MsgpackFileStateRepository(tmp_path / "state.msgpack")
        assert await repository.load() is None

    @pytest.mark.asyncio
    async def test_save_and_load(self, tmp_path, state):
        path = tmp_path / "nested" / "state.msgpack"
        repository = MsgpackFileStateRepository(path)

        state.last_id = 3
        await repository.save(state)

        assert path.exists()
        assert await MsgpackFileStateRepository(path).load() == state

    @pytest.mark.asyncio
    async def test_overwrite_leaves_no_temporary_files(self, tmp_path, state):
        path = tmp_path / "state.msgpack"
        repository = MsgpackFileStateRepository(path)

        await repository.save(state)
        state.subscription_fee = 2000
        await repository.save(state)

        assert [p.name for p in tmp_path.iterdir()] == ["state.msgpack"]
        assert (await repository.load()).subscription_fee == 2000

    @pytest.mark.asyncio
    async def test_reads_json_state(self, tmp_path, state):
        path = tmp_path / "state.json"
        path.write_bytes(serialize_state_to_json(state))

        assert await MsgpackFileStateRepository(path).load() == state

    @pytest.mark.asyncio
    async def test_corrupt_file(self, tmp_path):
        path = tmp_path / "state.msgpack"
        path.write_bytes(b"\x81\xc1")

        with pytest.raises(StateStorageError):
            await MsgpackFileStateRepository(path).load()

    @pytest.mark.asyncio
    async def test_file_neither_msgpack_nor_utf8(self, tmp_path):
        path = tmp_path / "state.msgpack"
        path.write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(StateStorageError):
            await MsgpackFileStateRepository(path).load()

    @pytest.mark.asyncio
    async def test_unreadable_path(self, tmp_path):
        # A directory cannot be read as a file
        with pytest.raises(StateStorageError):
            await MsgpackFileStateRepository(tmp_path).load()
