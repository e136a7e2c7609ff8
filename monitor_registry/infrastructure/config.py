"""Configuration objects for the infrastructure layer following DDD principles."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..domain.services import ADDRESS_INDEX_CAPACITY, USER_INDEX_CAPACITY
from ..domain.value_objects import U64_MAX, Principal

# About 30 days of ten-minute blocks
DEFAULT_SUBSCRIPTION_DURATION = 4320
DEFAULT_SUBSCRIPTION_FEE = 1_000_000


class RegistrySettings(BaseModel):
    """Strongly-typed deployment configuration for the registry.

    The privileged owner and the registry account are fixed at deployment;
    duration and fee are only the initial values and can later be changed by
    the privileged owner.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        strict=True,
        validate_assignment=True,
    )

    # Identities
    privileged_owner: Principal = Field(
        ...,
        description="Identity allowed to withdraw fees and change platform parameters",
    )
    registry_account: Principal = Field(
        ...,
        description="Account holding the registry's funds; source of fee withdrawals",
    )

    # Platform parameters
    subscription_duration: int = Field(
        default=DEFAULT_SUBSCRIPTION_DURATION,
        gt=0,
        le=U64_MAX,
        description="Initial validity window of a subscription, in blocks",
    )
    subscription_fee: int = Field(
        default=DEFAULT_SUBSCRIPTION_FEE,
        gt=0,
        le=U64_MAX,
        description="Initial fee charged on create and renew",
    )

    # Index capacities
    address_index_capacity: int = Field(
        default=ADDRESS_INDEX_CAPACITY,
        ge=1,
        description="Maximum subscriptions that may ever target one address",
    )
    user_index_capacity: int = Field(
        default=USER_INDEX_CAPACITY,
        ge=1,
        description="Maximum subscriptions one user may ever create",
    )

    # Runtime
    state_path: str | None = Field(
        default=None,
        description="File to persist state to; in-memory when unset",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level name",
    )

    @field_validator("privileged_owner", "registry_account", mode="before")
    @classmethod
    def parse_principal(cls, v: Any) -> Principal:
        """Parse a principal from string or Principal object."""
        if isinstance(v, Principal):
            return v
        if isinstance(v, str):
            return Principal(value=v)
        raise ValueError(f"Invalid principal type: {type(v)}")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the logging level name."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Invalid log level: {v}")
        return level

    @model_validator(mode="after")
    def validate_accounts(self) -> RegistrySettings:
        """The registry account must be distinct from the privileged owner."""
        if self.registry_account == self.privileged_owner:
            raise ValueError("registry_account must differ from privileged_owner")
        return self

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return logging.getLevelNamesMapping()[self.log_level]
