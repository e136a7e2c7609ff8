"""Domain-specific exceptions following DDD principles.

Every rejected operation raises one of these. A raised error guarantees
that no record, index, counter or balance was changed.
"""

from typing import Any

from .enums import ErrorCode


class RegistryError(Exception):
    """Base exception for all registry errors."""

    code: ErrorCode | None = None

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def numeric_code(self) -> int | None:
        """Numeric error code, if the error carries one."""
        return self.code.numeric if self.code else None


class UnauthorizedError(RegistryError):
    """Caller lacks the privileged owner role."""

    code = ErrorCode.UNAUTHORIZED

    def __init__(self, caller: str, operation: str):
        super().__init__(
            f"Caller '{caller}' is not authorized to perform '{operation}'",
            details={"caller": caller, "operation": operation},
        )
        self.caller = caller
        self.operation = operation


class InvalidAddressError(RegistryError):
    """Target address fails the validity predicate."""

    code = ErrorCode.INVALID_ADDRESS

    def __init__(self, address: str, reason: str = "address cannot be monitored"):
        super().__init__(f"Invalid address '{address}': {reason}", details={"address": address})
        self.address = address


class AlreadySubscribedError(RegistryError):
    """Reserved for duplicate-subscription detection; no transition raises it."""

    code = ErrorCode.ALREADY_SUBSCRIBED


class SubscriptionNotFoundError(RegistryError):
    """No record exists for the given id."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, subscription_id: int):
        super().__init__(
            f"Subscription {subscription_id} not found",
            details={"subscription_id": subscription_id},
        )
        self.subscription_id = subscription_id


class SubscriptionExpiredError(RegistryError):
    """Mutation attempted on a subscription that is no longer active."""

    code = ErrorCode.SUBSCRIPTION_EXPIRED

    def __init__(self, subscription_id: int, expiry: int, now: int):
        super().__init__(
            f"Subscription {subscription_id} expired at block {expiry} (now {now})",
            details={"subscription_id": subscription_id, "expiry": expiry, "now": now},
        )
        self.subscription_id = subscription_id


class InvalidParametersError(RegistryError):
    """Zero frequency, no tracking flag set, bad notes, or a zero config update."""

    code = ErrorCode.INVALID_PARAMETERS

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field
        if field:
            self.details["field"] = field


class PaymentFailedError(RegistryError):
    """The payment rail rejected a transfer."""

    code = ErrorCode.PAYMENT_FAILED

    def __init__(self, message: str, sender: str | None = None, recipient: str | None = None):
        super().__init__(message)
        if sender:
            self.details["sender"] = sender
        if recipient:
            self.details["recipient"] = recipient


class NotSubscriptionOwnerError(RegistryError):
    """Caller is not the owner of the subscription record."""

    code = ErrorCode.NOT_SUBSCRIPTION_OWNER

    def __init__(self, caller: str, subscription_id: int):
        super().__init__(
            f"Caller '{caller}' does not own subscription {subscription_id}",
            details={"caller": caller, "subscription_id": subscription_id},
        )
        self.caller = caller
        self.subscription_id = subscription_id


class InsufficientFundsError(RegistryError):
    """Caller balance is below the fee; checked before any transfer."""

    code = ErrorCode.INSUFFICIENT_FUNDS

    def __init__(self, caller: str, balance: int, required: int):
        super().__init__(
            f"Balance {balance} of '{caller}' is below the required fee {required}",
            details={"caller": caller, "balance": balance, "required": required},
        )
        self.balance = balance
        self.required = required


class IndexCapacityError(RegistryError):
    """A bounded index for the key is already at its cap."""

    code = ErrorCode.INDEX_FULL

    def __init__(self, index_name: str, key: str, capacity: int):
        super().__init__(
            f"Index '{index_name}' for '{key}' is full ({capacity} entries)",
            details={"index": index_name, "key": key, "capacity": capacity},
        )
        self.index_name = index_name
        self.key = key
        self.capacity = capacity


class StateStorageError(RegistryError):
    """Registry state could not be loaded or saved."""

    code = ErrorCode.STORAGE_ERROR

    def __init__(self, message: str, location: str | None = None):
        super().__init__(message)
        if location:
            self.details["location"] = location
