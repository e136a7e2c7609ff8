"""Domain value objects following Domain-Driven Design principles.

These value objects encapsulate registry concepts and provide type safety,
validation, and clear business meaning to what would otherwise be primitive types.
"""

from __future__ import annotations

import re
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .exceptions import InvalidAddressError, InvalidParametersError

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
NOTES_MAX_BYTES = 256


class Principal(BaseModel):
    """Value object representing an on-chain identity.

    Used for subscription owners, monitored addresses, the privileged owner
    and the registry's own account. Standard principals are ``S`` followed by
    a version character and 38-39 c32 characters; contract principals append
    ``.contract-name``.
    """

    model_config = ConfigDict(frozen=True)

    PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"^S[PMTN][0-9A-HJKMNP-TV-Z]{38,39}(\.[a-zA-Z][a-zA-Z0-9_-]{0,39})?$"
    )

    value: str = Field(..., strict=True, min_length=40, max_length=82, description="Principal string")

    @model_validator(mode="after")
    def validate_format(self) -> Principal:
        """Validate the principal format."""
        if not self.PATTERN.match(self.value):
            raise ValueError(f"Invalid principal '{self.value}'")
        return self

    @classmethod
    def parse(cls, value: Any) -> Principal:
        """Parse a principal from a string or Principal object.

        Raises:
            InvalidAddressError: If the value is not a well-formed principal
        """
        if isinstance(value, Principal):
            return value
        if not isinstance(value, str):
            raise InvalidAddressError(repr(value), "principal must be a string")
        try:
            return cls(value=value)
        except ValidationError as e:
            raise InvalidAddressError(value, "malformed principal") from e

    @property
    def is_contract(self) -> bool:
        """Whether this is a contract principal."""
        return "." in self.value

    def __str__(self) -> str:
        """String representation returns the value."""
        return self.value

    def __eq__(self, other: Any) -> bool:
        """Equality comparison."""
        if isinstance(other, Principal):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return False

    def __hash__(self) -> int:
        """Make hashable for use in sets and dicts."""
        return hash(self.value)


class TrackingFlags(BaseModel):
    """Which kinds of activity a subscription watches.

    At least one flag must be set.
    """

    model_config = ConfigDict(frozen=True)

    track_stx: bool = Field(default=False, strict=True, description="Native-asset transfers")
    track_assets: bool = Field(default=False, strict=True, description="Token transfers")
    track_calls: bool = Field(default=False, strict=True, description="Contract-call events")

    @model_validator(mode="after")
    def validate_any_flag(self) -> TrackingFlags:
        """Ensure at least one kind of activity is tracked."""
        if not (self.track_stx or self.track_assets or self.track_calls):
            raise ValueError("At least one tracking flag must be enabled")
        return self


class MonitoringParameters(BaseModel):
    """Mutable configuration of a subscription."""

    model_config = ConfigDict(frozen=True)

    alert_frequency: int = Field(..., strict=True, ge=1, le=U32_MAX, description="Blocks between alerts")
    min_tx_value: int = Field(default=0, strict=True, ge=0, le=U64_MAX, description="Smallest value of interest")
    tracking: TrackingFlags
    notes: str = Field(default="", strict=True, description="Free-text note, at most 256 bytes UTF-8")

    @model_validator(mode="after")
    def validate_notes_size(self) -> MonitoringParameters:
        """Notes are bounded in encoded bytes, not characters."""
        if len(self.notes.encode("utf-8")) > NOTES_MAX_BYTES:
            raise ValueError(f"notes exceed {NOTES_MAX_BYTES} bytes")
        return self

    @classmethod
    def create(
        cls,
        alert_frequency: int,
        min_tx_value: int,
        track_stx: bool,
        track_assets: bool,
        track_calls: bool,
        notes: str = "",
    ) -> MonitoringParameters:
        """Build parameters from raw call arguments.

        Raises:
            InvalidParametersError: If any argument violates the invariants
        """
        try:
            return cls(
                alert_frequency=alert_frequency,
                min_tx_value=min_tx_value,
                tracking=TrackingFlags(
                    track_stx=track_stx,
                    track_assets=track_assets,
                    track_calls=track_calls,
                ),
                notes=notes,
            )
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise InvalidParametersError(f"Invalid monitoring parameters: {first['msg']}", field) from e

    @property
    def track_stx(self) -> bool:
        return self.tracking.track_stx

    @property
    def track_assets(self) -> bool:
        return self.tracking.track_assets

    @property
    def track_calls(self) -> bool:
        return self.tracking.track_calls
