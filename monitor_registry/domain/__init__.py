"""Domain layer - Core business logic and models."""

from .enums import ErrorCode, RegistryOperation, SubscriptionStatus
from .exceptions import (
    AlreadySubscribedError,
    IndexCapacityError,
    InsufficientFundsError,
    InvalidAddressError,
    InvalidParametersError,
    NotSubscriptionOwnerError,
    PaymentFailedError,
    RegistryError,
    StateStorageError,
    SubscriptionExpiredError,
    SubscriptionNotFoundError,
    UnauthorizedError,
)
from .models import RegistryState, RegistryStats, Subscription, UsageCounters
from .services import (
    AccessControlGate,
    BoundedIndex,
    IdentifierAllocator,
    UsageCounterService,
)
from .value_objects import MonitoringParameters, Principal, TrackingFlags

__all__ = [
    "AccessControlGate",
    "AlreadySubscribedError",
    "BoundedIndex",
    "ErrorCode",
    "IdentifierAllocator",
    "IndexCapacityError",
    "InsufficientFundsError",
    "InvalidAddressError",
    "InvalidParametersError",
    "MonitoringParameters",
    "NotSubscriptionOwnerError",
    "PaymentFailedError",
    "Principal",
    "RegistryError",
    "RegistryOperation",
    "RegistryState",
    "RegistryStats",
    "StateStorageError",
    "Subscription",
    "SubscriptionExpiredError",
    "SubscriptionNotFoundError",
    "SubscriptionStatus",
    "TrackingFlags",
    "UnauthorizedError",
    "UsageCounterService",
    "UsageCounters",
]
