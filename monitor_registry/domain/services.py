"""Domain services containing business logic.

Following Domain-Driven Design principles, these services encapsulate
the registry rules that don't naturally belong to a single record: id
allocation, the bounded reverse indexes, usage counters and access control.
They are stateless and operate on the ``RegistryState`` they are given.
"""

from __future__ import annotations

from typing import Any

from .exceptions import (
    IndexCapacityError,
    InvalidAddressError,
    NotSubscriptionOwnerError,
    SubscriptionExpiredError,
    SubscriptionNotFoundError,
    UnauthorizedError,
)
from .models import RegistryState, Subscription
from .value_objects import Principal

ADDRESS_INDEX_CAPACITY = 20
USER_INDEX_CAPACITY = 50


class IdentifierAllocator:
    """Issues unique, strictly increasing subscription ids.

    The counter starts at 0, so the first id issued is 1.
    """

    @staticmethod
    def next_id(state: RegistryState) -> int:
        """Advance the counter and return the new id."""
        state.last_id = state.last_id + 1
        return state.last_id


class BoundedIndex:
    """Append-only, capacity-limited ordered sequence of ids per principal.

    There is deliberately no removal: cancelling a subscription leaves its id
    in place, so every id ever appended keeps consuming capacity.
    """

    def __init__(self, name: str, field: str, capacity: int):
        """Initialize the index view.

        Args:
            name: Index name used in errors and logs
            field: ``RegistryState`` attribute holding the mapping
            capacity: Maximum number of ids per key
        """
        if capacity < 1:
            raise ValueError("Index capacity must be positive")
        self.name = name
        self.field = field
        self.capacity = capacity

    def _entries(self, state: RegistryState) -> dict[str, list[int]]:
        return getattr(state, self.field)

    def lookup(self, state: RegistryState, key: Principal | str) -> list[int]:
        """Ids for ``key`` in insertion order; empty if none."""
        return list(self._entries(state).get(str(key), []))

    def has_room(self, state: RegistryState, key: Principal | str) -> bool:
        return len(self._entries(state).get(str(key), [])) < self.capacity

    def require_room(self, state: RegistryState, key: Principal | str) -> None:
        """Raise ``IndexCapacityError`` if ``key`` is at capacity."""
        if not self.has_room(state, key):
            raise IndexCapacityError(self.name, str(key), self.capacity)

    def append(self, state: RegistryState, key: Principal | str, subscription_id: int) -> None:
        """Append ``subscription_id`` under ``key``.

        Raises:
            IndexCapacityError: If the sequence is already full; nothing is changed
        """
        self.require_room(state, key)
        entries = self._entries(state)
        entries[str(key)] = [*entries.get(str(key), []), subscription_id]


def address_index(capacity: int = ADDRESS_INDEX_CAPACITY) -> BoundedIndex:
    """Index of subscription ids by monitored address."""
    return BoundedIndex("by-address", "address_index", capacity)


def user_index(capacity: int = USER_INDEX_CAPACITY) -> BoundedIndex:
    """Index of subscription ids by owning user."""
    return BoundedIndex("by-user", "user_index", capacity)


class UsageCounterService:
    """Updates the process-wide usage counters as a side effect of transitions."""

    @staticmethod
    def record_created(state: RegistryState) -> None:
        state.counters.total_created += 1
        state.counters.total_active += 1

    @staticmethod
    def record_reactivated(state: RegistryState) -> None:
        """A renewal moved an expired subscription back to active."""
        state.counters.total_active += 1

    @staticmethod
    def record_cancelled(state: RegistryState) -> None:
        """Decrement on every cancellation, never below zero."""
        state.counters.total_active = max(state.counters.total_active - 1, 0)

    @staticmethod
    def recount_active(state: RegistryState, now: int) -> int:
        """Derive the true active count from record state."""
        return sum(1 for subscription in state.subscriptions.values() if subscription.is_active(now))


class AccessControlGate:
    """Resolves whether a caller may perform an action.

    All predicates are pure functions of the caller and the state; the
    ``require_*`` variants raise the matching domain error instead.
    """

    def __init__(self, privileged_owner: Principal):
        self.privileged_owner = privileged_owner

    def is_privileged_owner(self, caller: Principal) -> bool:
        return caller == self.privileged_owner

    def is_valid_monitored_address(self, address: Principal) -> bool:
        """Placeholder validity check: the privileged owner cannot be monitored."""
        return address != self.privileged_owner

    @staticmethod
    def find_subscription(state: RegistryState, subscription_id: Any) -> Subscription | None:
        """Record for ``subscription_id``; ids that are not plain ints never match."""
        if isinstance(subscription_id, bool) or not isinstance(subscription_id, int):
            return None
        return state.subscriptions.get(subscription_id)

    @classmethod
    def is_subscription_owner(cls, state: RegistryState, caller: Principal, subscription_id: int) -> bool:
        subscription = cls.find_subscription(state, subscription_id)
        return subscription is not None and subscription.owner == caller

    @classmethod
    def subscription_active(cls, state: RegistryState, subscription_id: int, now: int) -> bool:
        subscription = cls.find_subscription(state, subscription_id)
        return subscription is not None and subscription.is_active(now)

    def require_privileged_owner(self, caller: Principal, operation: str) -> None:
        if not self.is_privileged_owner(caller):
            raise UnauthorizedError(str(caller), operation)

    def require_valid_monitored_address(self, address: Principal) -> None:
        if not self.is_valid_monitored_address(address):
            raise InvalidAddressError(str(address), "the privileged owner cannot be monitored")

    @classmethod
    def require_subscription(cls, state: RegistryState, subscription_id: int) -> Subscription:
        """Return the record or raise ``SubscriptionNotFoundError``."""
        subscription = cls.find_subscription(state, subscription_id)
        if subscription is None:
            raise SubscriptionNotFoundError(subscription_id)
        return subscription

    def require_owner(self, state: RegistryState, caller: Principal, subscription_id: int) -> Subscription:
        """Return the record if ``caller`` owns it."""
        subscription = self.require_subscription(state, subscription_id)
        if not self.is_subscription_owner(state, caller, subscription_id):
            raise NotSubscriptionOwnerError(str(caller), subscription_id)
        return subscription

    def require_active(self, state: RegistryState, subscription_id: int, now: int) -> Subscription:
        subscription = self.require_subscription(state, subscription_id)
        if not self.subscription_active(state, subscription_id, now):
            raise SubscriptionExpiredError(subscription_id, subscription.expiry, now)
        return subscription


class MetricsNamingService:
    """Domain service for consistent metrics naming."""

    @staticmethod
    def operation_metric_name(operation: str, suffix: str) -> str:
        """Generate a metric name such as ``registry.create_subscription.success``."""
        return f"registry.{operation}.{suffix}"

    @staticmethod
    def error_metric_name(operation: str, error_code: str) -> str:
        return f"registry.{operation}.error.{error_code.lower()}"
