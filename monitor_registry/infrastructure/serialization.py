"""Serialization of the registry state to MessagePack and JSON."""

import json

import msgpack
from pydantic import ValidationError

from ..domain.exceptions import StateStorageError
from ..domain.models import RegistryState

# Bumped whenever the persisted layout changes incompatibly
STATE_FORMAT_VERSION = 1


def _envelope(state: RegistryState) -> dict:
    # mode="json" turns the integer keys of ``subscriptions`` into strings
    return {"version": STATE_FORMAT_VERSION, "state": state.model_dump(mode="json")}


def _from_envelope(data: object) -> RegistryState:
    if not isinstance(data, dict) or "state" not in data:
        raise StateStorageError("Persisted data is not a registry state envelope")
    version = data.get("version")
    if version != STATE_FORMAT_VERSION:
        raise StateStorageError(f"Unsupported state format version: {version}")
    try:
        return RegistryState.model_validate(data["state"])
    except ValidationError as e:
        raise StateStorageError(f"Persisted registry state is invalid: {e}") from e


def serialize_state_to_msgpack(state: RegistryState) -> bytes:
    """Serialize the registry state to MessagePack bytes."""
    try:
        return bytes(msgpack.packb(_envelope(state), use_bin_type=True))
    except (TypeError, ValueError) as e:
        raise StateStorageError(f"Failed to serialize state to msgpack: {e}") from e


def deserialize_state_from_msgpack(data: bytes) -> RegistryState:
    """Deserialize MessagePack bytes to the registry state."""
    try:
        unpacked = msgpack.unpackb(data, raw=False)
    except (msgpack.exceptions.UnpackException, ValueError) as e:
        raise StateStorageError(f"Failed to deserialize state from msgpack: {e}") from e
    return _from_envelope(unpacked)


def serialize_state_to_json(state: RegistryState) -> bytes:
    """Serialize the registry state to JSON bytes."""
    return json.dumps(_envelope(state), sort_keys=True).encode()


def deserialize_state_from_json(data: bytes) -> RegistryState:
    """Deserialize JSON bytes to the registry state."""
    try:
        text = data.decode() if isinstance(data, bytes) else data
    except UnicodeDecodeError as e:
        raise StateStorageError(f"State data is neither msgpack nor UTF-8 JSON: {e}") from e
    if not text or text.isspace():
        raise StateStorageError("Empty or whitespace-only JSON data")
    try:
        return _from_envelope(json.loads(text))
    except json.JSONDecodeError as e:
        raise StateStorageError(f"Invalid JSON format: {e}") from e


def is_msgpack(data: bytes) -> bool:
    """Check if data looks like a MessagePack map (JSON starts with '{')."""
    if not data:
        return False
    first_byte = data[0]
    return 0x80 <= first_byte <= 0x8F or first_byte in (0xDE, 0xDF)


def detect_and_deserialize_state(data: bytes) -> RegistryState:
    """Automatically detect format and deserialize."""
    if not data:
        raise StateStorageError("Empty data received")
    if is_msgpack(data):
        return deserialize_state_from_msgpack(data)
    return deserialize_state_from_json(data)
