"""Domain enums for type safety and consistency.

This module centralizes the enumeration types used across the registry,
ensuring type safety and preventing string literal errors.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes for every rejected registry operation.

    Each code maps to a fixed numeric value so callers that only see
    integers (logs, persisted audit trails) can still tell errors apart.
    """

    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    ALREADY_SUBSCRIBED = "ALREADY_SUBSCRIBED"  # Reserved, never raised
    NOT_FOUND = "NOT_FOUND"
    SUBSCRIPTION_EXPIRED = "SUBSCRIPTION_EXPIRED"
    INVALID_PARAMETERS = "INVALID_PARAMETERS"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    NOT_SUBSCRIPTION_OWNER = "NOT_SUBSCRIPTION_OWNER"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INDEX_FULL = "INDEX_FULL"
    STORAGE_ERROR = "STORAGE_ERROR"

    @property
    def numeric(self) -> int:
        """Numeric form of the code (100-based)."""
        return _NUMERIC_CODES[self]


_NUMERIC_CODES = {code: 100 + offset for offset, code in enumerate(ErrorCode)}


class SubscriptionStatus(str, Enum):
    """Lifecycle status of a subscription at a given block height."""

    ACTIVE = "ACTIVE"  # expiry is in the future
    EXPIRED = "EXPIRED"  # expired passively or cancelled


class RegistryOperation(str, Enum):
    """Names of the operations exposed by the registry.

    Used for metric names, log context and domain events.
    """

    CREATE = "create_subscription"
    RENEW = "renew_subscription"
    UPDATE = "update_subscription_parameters"
    CANCEL = "cancel_subscription"
    WITHDRAW_FEES = "withdraw_fees"
    UPDATE_DURATION = "update_subscription_duration"
    UPDATE_FEE = "update_subscription_fee"
