"""Subscription registry application service.

Orchestrates the create/renew/update/cancel transitions and the privileged
operations by coordinating domain services with the clock, payment,
repository, event, logging and metrics ports.

Every mutating operation holds the registry lock for its whole duration,
reads the block height once, and works on a deep copy of the state. The
copy replaces the live state only after the fee transfer (the last step
that can be rejected) has gone through, so a rejected operation leaves
records, indexes, counters and balances exactly as they were. A save that
fails after that point is logged and does not undo the transition.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

from ..domain.enums import ErrorCode, RegistryOperation
from ..domain.events import (
    DomainEvent,
    FeesWithdrawnEvent,
    SubscriptionCancelledEvent,
    SubscriptionCreatedEvent,
    SubscriptionDurationChangedEvent,
    SubscriptionFeeChangedEvent,
    SubscriptionRenewedEvent,
    SubscriptionUpdatedEvent,
)
from ..domain.exceptions import (
    InsufficientFundsError,
    InvalidParametersError,
    RegistryError,
    StateStorageError,
)
from ..domain.models import RegistryState, RegistryStats, Subscription
from ..domain.services import (
    ADDRESS_INDEX_CAPACITY,
    USER_INDEX_CAPACITY,
    AccessControlGate,
    IdentifierAllocator,
    MetricsNamingService,
    UsageCounterService,
    address_index,
    user_index,
)
from ..domain.value_objects import U64_MAX, MonitoringParameters, Principal
from ..ports.clock import BlockClockPort
from ..ports.event_publisher import EventPublisherPort
from ..ports.logger import LogContext, LoggerPort
from ..ports.metrics import MetricsPort
from ..ports.payment import PaymentPort
from ..ports.repository import RegistryStateRepository
from .dtos import SubscriptionDetails


class SubscriptionRegistry:
    """Registry of address-monitoring subscriptions.

    Example:
        >>> registry = await build_registry(settings)
        >>> sub_id = await registry.create_subscription(
        ...     caller, address, alert_frequency=100, min_tx_value=1_000_000,
        ...     track_stx=True, track_assets=True, track_calls=False, notes="m1",
        ... )
        >>> details = registry.get_subscription_details(sub_id)
    """

    def __init__(
        self,
        state: RegistryState,
        registry_account: Principal,
        clock: BlockClockPort,
        payments: PaymentPort,
        repository: RegistryStateRepository,
        publisher: EventPublisherPort,
        logger: LoggerPort,
        metrics: MetricsPort,
        address_index_capacity: int = ADDRESS_INDEX_CAPACITY,
        user_index_capacity: int = USER_INDEX_CAPACITY,
    ):
        """Initialize the registry with its state and ports.

        Args:
            state: Current committed state
            registry_account: Account fee withdrawals are paid from
            clock: Block height source
            payments: Payment rail
            repository: Where committed state is saved
            publisher: Sink for domain events
            logger: Logger
            metrics: Metrics collector
            address_index_capacity: Cap of the by-address index
            user_index_capacity: Cap of the by-user index
        """
        self._state = state
        self._registry_account = registry_account
        self._clock = clock
        self._payments = payments
        self._repository = repository
        self._publisher = publisher
        self._logger = logger
        self._metrics = metrics

        self._gate = AccessControlGate(state.privileged_owner)
        self._allocator = IdentifierAllocator()
        self._counters = UsageCounterService()
        self._by_address = address_index(address_index_capacity)
        self._by_user = user_index(user_index_capacity)
        self._lock = asyncio.Lock()

    @classmethod
    async def open(
        cls,
        *,
        privileged_owner: Principal,
        registry_account: Principal,
        subscription_duration: int,
        subscription_fee: int,
        clock: BlockClockPort,
        payments: PaymentPort,
        repository: RegistryStateRepository,
        publisher: EventPublisherPort,
        logger: LoggerPort,
        metrics: MetricsPort,
        address_index_capacity: int = ADDRESS_INDEX_CAPACITY,
        user_index_capacity: int = USER_INDEX_CAPACITY,
    ) -> SubscriptionRegistry:
        """Load persisted state, or initialize and save a fresh one.

        The privileged owner is fixed at first initialization; a persisted
        owner always wins over the configured one.
        """
        state = await repository.load()
        if state is None:
            state = RegistryState(
                privileged_owner=privileged_owner,
                subscription_duration=subscription_duration,
                subscription_fee=subscription_fee,
            )
            await repository.save(state)
            logger.info(
                "Initialized new registry state",
                LogContext(block_height=clock.block_height(), caller=str(privileged_owner)),
            )
        else:
            if state.privileged_owner != privileged_owner:
                logger.warning(
                    f"Configured privileged owner {privileged_owner} differs from persisted "
                    f"{state.privileged_owner}; keeping the persisted owner"
                )
            logger.info(f"Loaded registry state with {len(state.subscriptions)} subscriptions")

        return cls(
            state=state,
            registry_account=registry_account,
            clock=clock,
            payments=payments,
            repository=repository,
            publisher=publisher,
            logger=logger,
            metrics=metrics,
            address_index_capacity=address_index_capacity,
            user_index_capacity=user_index_capacity,
        )

    # Transaction plumbing

    @asynccontextmanager
    async def _operation(self, operation: RegistryOperation, caller: Any) -> AsyncIterator[LogContext]:
        """Serialize, time, log and count one mutating operation."""
        context = LogContext(operation=operation.value, caller=str(caller))
        async with self._lock:
            # Lock wait is not part of the operation latency
            start = time.perf_counter()
            with self._metrics.timer(MetricsNamingService.operation_metric_name(operation.value, "latency_ms")):
                context.block_height = self._clock.block_height()
                try:
                    yield context
                except RegistryError as e:
                    code = e.code.value if e.code else "UNKNOWN"
                    context.duration_ms = (time.perf_counter() - start) * 1000
                    self._metrics.increment(MetricsNamingService.error_metric_name(operation.value, code))
                    self._logger.warning(f"{operation.value} rejected: {e.message}", context.with_error(code))
                    raise
            context.duration_ms = (time.perf_counter() - start) * 1000
        self._metrics.increment(MetricsNamingService.operation_metric_name(operation.value, "success"))
        self._logger.debug(f"{operation.value} completed", context)

    async def _commit(self, working: RegistryState, events: Sequence[DomainEvent], context: LogContext) -> None:
        """Make ``working`` the live state, persist it and publish ``events``.

        Once this is called the fee has moved, so the transition stands even
        if the repository cannot save it: the failure is logged and counted,
        and the next successful save persists it.
        """
        self._state = working
        try:
            await self._repository.save(working)
        except StateStorageError as e:
            self._metrics.increment("registry.persistence.error")
            self._logger.error(
                f"Committed transition could not be persisted: {e.message}",
                context.with_error(ErrorCode.STORAGE_ERROR.value),
            )

        self._metrics.gauge("registry.subscriptions.total", working.counters.total_created)
        self._metrics.gauge("registry.subscriptions.active", working.counters.total_active)
        await self._publish(events, context)

    async def _publish(self, events: Sequence[DomainEvent], context: LogContext) -> None:
        # The transition is already committed; a failing sink must not undo it
        for event in events:
            try:
                await self._publisher.publish(event)
            except Exception:
                self._logger.exception(f"Failed to publish {event.event_type}", context)

    async def _require_funds(self, payer: Principal, fee: int) -> None:
        balance = await self._payments.balance_of(payer)
        if balance < fee:
            raise InsufficientFundsError(str(payer), balance, fee)

    @staticmethod
    def _require_positive_u64(value: Any, field: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 < value <= U64_MAX:
            raise InvalidParametersError(f"{field} must be a positive integer, got {value!r}", field)
        return value

    # Subscription transitions

    async def create_subscription(
        self,
        caller: Principal | str,
        address: Principal | str,
        alert_frequency: int,
        min_tx_value: int,
        track_stx: bool,
        track_assets: bool,
        track_calls: bool,
        notes: str = "",
    ) -> int:
        """Create a subscription on ``address`` owned by ``caller``.

        Charges the current fee to the privileged owner and appends the new
        id to both the by-address and the by-user index.

        Returns:
            The new subscription id

        Raises:
            InvalidAddressError: If ``address`` cannot be monitored
            InvalidParametersError: If frequency, flags or notes are invalid
            InsufficientFundsError: If ``caller`` cannot pay the fee
            IndexCapacityError: If the address or the user index is full
            PaymentFailedError: If the payment rail rejects the fee transfer
        """
        async with self._operation(RegistryOperation.CREATE, caller) as context:
            now = context.block_height
            owner = Principal.parse(caller)
            target = Principal.parse(address)
            self._gate.require_valid_monitored_address(target)
            parameters = MonitoringParameters.create(
                alert_frequency, min_tx_value, track_stx, track_assets, track_calls, notes
            )

            fee = self._state.subscription_fee
            await self._require_funds(owner, fee)

            working = self._state.working_copy()
            # Both caps are checked before anything is written
            self._by_address.require_room(working, target)
            self._by_user.require_room(working, owner)

            subscription_id = self._allocator.next_id(working)
            expiry = now + working.subscription_duration
            working.subscriptions[subscription_id] = Subscription(
                id=subscription_id,
                owner=owner,
                monitored_address=target,
                expiry=expiry,
                parameters=parameters,
                created_at=now,
            )
            self._by_address.append(working, target, subscription_id)
            self._by_user.append(working, owner, subscription_id)
            self._counters.record_created(working)

            await self._payments.transfer(fee, owner, working.privileged_owner)

            context.subscription_id = subscription_id
            await self._commit(
                working,
                [
                    SubscriptionCreatedEvent(
                        block_height=now,
                        subscription_id=subscription_id,
                        owner=str(owner),
                        monitored_address=str(target),
                        expiry=expiry,
                        fee_paid=fee,
                    )
                ],
                context,
            )
            self._logger.info(f"Subscription {subscription_id} created on {target}", context)
            return subscription_id

    async def renew_subscription(self, caller: Principal | str, subscription_id: int) -> int:
        """Extend a subscription by the current duration.

        An active subscription extends from its expiry, an expired one from
        the current block. Only a renewal that brings an expired subscription
        back to life increments the active counter.

        Returns:
            The new expiry

        Raises:
            SubscriptionNotFoundError: If no record exists
            NotSubscriptionOwnerError: If ``caller`` does not own it
            InsufficientFundsError: If ``caller`` cannot pay the fee
            PaymentFailedError: If the payment rail rejects the fee transfer
        """
        async with self._operation(RegistryOperation.RENEW, caller) as context:
            now = context.block_height
            context.subscription_id = subscription_id
            owner = Principal.parse(caller)

            working = self._state.working_copy()
            subscription = self._gate.require_owner(working, owner, subscription_id)

            fee = working.subscription_fee
            await self._require_funds(owner, fee)

            was_active = subscription.is_active(now)
            previous_expiry = subscription.expiry
            new_expiry = subscription.extend(working.subscription_duration, now)
            if not was_active:
                self._counters.record_reactivated(working)

            await self._payments.transfer(fee, owner, working.privileged_owner)

            await self._commit(
                working,
                [
                    SubscriptionRenewedEvent(
                        block_height=now,
                        subscription_id=subscription_id,
                        previous_expiry=previous_expiry,
                        new_expiry=new_expiry,
                        reactivated=not was_active,
                        fee_paid=fee,
                    )
                ],
                context,
            )
            self._logger.info(f"Subscription {subscription_id} renewed until block {new_expiry}", context)
            return new_expiry

    async def update_subscription_parameters(
        self,
        caller: Principal | str,
        subscription_id: int,
        alert_frequency: int,
        min_tx_value: int,
        track_stx: bool,
        track_assets: bool,
        track_calls: bool,
        notes: str = "",
    ) -> bool:
        """Replace the monitoring parameters of an active subscription.

        Owner, monitored address and expiry are never changed. No fee.

        Raises:
            SubscriptionNotFoundError: If no record exists
            NotSubscriptionOwnerError: If ``caller`` does not own it
            SubscriptionExpiredError: If it is no longer active
            InvalidParametersError: If frequency, flags or notes are invalid
        """
        async with self._operation(RegistryOperation.UPDATE, caller) as context:
            now = context.block_height
            context.subscription_id = subscription_id
            owner = Principal.parse(caller)

            working = self._state.working_copy()
            subscription = self._gate.require_owner(working, owner, subscription_id)
            self._gate.require_active(working, subscription_id, now)
            parameters = MonitoringParameters.create(
                alert_frequency, min_tx_value, track_stx, track_assets, track_calls, notes
            )
            subscription.reconfigure(parameters)

            await self._commit(
                working,
                [
                    SubscriptionUpdatedEvent(
                        block_height=now,
                        subscription_id=subscription_id,
                        alert_frequency=parameters.alert_frequency,
                        min_tx_value=parameters.min_tx_value,
                        track_stx=parameters.track_stx,
                        track_assets=parameters.track_assets,
                        track_calls=parameters.track_calls,
                    )
                ],
                context,
            )
            self._logger.info(f"Subscription {subscription_id} parameters updated", context)
            return True

    async def cancel_subscription(self, caller: Principal | str, subscription_id: int) -> bool:
        """Terminate a subscription at the current block.

        The record stays readable as expired and its id stays in both
        indexes. The active counter is decremented on every cancellation,
        saturating at zero.

        Raises:
            SubscriptionNotFoundError: If no record exists
            NotSubscriptionOwnerError: If ``caller`` does not own it
        """
        async with self._operation(RegistryOperation.CANCEL, caller) as context:
            now = context.block_height
            context.subscription_id = subscription_id
            owner = Principal.parse(caller)

            working = self._state.working_copy()
            subscription = self._gate.require_owner(working, owner, subscription_id)
            was_active = subscription.is_active(now)
            subscription.terminate(now)
            self._counters.record_cancelled(working)

            await self._commit(
                working,
                [
                    SubscriptionCancelledEvent(
                        block_height=now,
                        subscription_id=subscription_id,
                        was_active=was_active,
                    )
                ],
                context,
            )
            self._logger.info(f"Subscription {subscription_id} cancelled", context)
            return True

    # Privileged operations

    async def withdraw_fees(self, caller: Principal | str, amount: int, recipient: Principal | str) -> int:
        """Pay ``amount`` from the registry account to ``recipient``.

        The payment rail enforces that the registry account holds enough.

        Raises:
            UnauthorizedError: If ``caller`` is not the privileged owner
            PaymentFailedError: If the payment rail rejects the transfer
        """
        async with self._operation(RegistryOperation.WITHDRAW_FEES, caller) as context:
            self._gate.require_privileged_owner(Principal.parse(caller), RegistryOperation.WITHDRAW_FEES.value)
            destination = Principal.parse(recipient)
            if isinstance(amount, bool) or not isinstance(amount, int):
                raise InvalidParametersError(f"amount must be an integer, got {amount!r}", "amount")

            await self._payments.transfer(amount, self._registry_account, destination)

            await self._publish(
                [
                    FeesWithdrawnEvent(
                        block_height=context.block_height,
                        amount=amount,
                        recipient=str(destination),
                    )
                ],
                context,
            )
            self._logger.info(f"Withdrew {amount} to {destination}", context)
            return amount

    async def update_subscription_duration(self, caller: Principal | str, duration: int) -> int:
        """Set the validity window used by subsequent creates and renewals.

        Raises:
            UnauthorizedError: If ``caller`` is not the privileged owner
            InvalidParametersError: If ``duration`` is not positive
        """
        async with self._operation(RegistryOperation.UPDATE_DURATION, caller) as context:
            self._gate.require_privileged_owner(Principal.parse(caller), RegistryOperation.UPDATE_DURATION.value)
            duration = self._require_positive_u64(duration, "duration")

            working = self._state.working_copy()
            old_duration = working.subscription_duration
            working.subscription_duration = duration

            await self._commit(
                working,
                [
                    SubscriptionDurationChangedEvent(
                        block_height=context.block_height,
                        old_duration=old_duration,
                        new_duration=duration,
                    )
                ],
                context,
            )
            self._logger.info(f"Subscription duration changed {old_duration} -> {duration}", context)
            return duration

    async def update_subscription_fee(self, caller: Principal | str, fee: int) -> int:
        """Set the fee charged by subsequent creates and renewals.

        Raises:
            UnauthorizedError: If ``caller`` is not the privileged owner
            InvalidParametersError: If ``fee`` is not positive
        """
        async with self._operation(RegistryOperation.UPDATE_FEE, caller) as context:
            self._gate.require_privileged_owner(Principal.parse(caller), RegistryOperation.UPDATE_FEE.value)
            fee = self._require_positive_u64(fee, "fee")

            working = self._state.working_copy()
            old_fee = working.subscription_fee
            working.subscription_fee = fee

            await self._commit(
                working,
                [
                    SubscriptionFeeChangedEvent(
                        block_height=context.block_height,
                        old_fee=old_fee,
                        new_fee=fee,
                    )
                ],
                context,
            )
            self._logger.info(f"Subscription fee changed {old_fee} -> {fee}", context)
            return fee

    # Read-only operations

    def get_subscription_details(self, subscription_id: int) -> SubscriptionDetails:
        """Get a subscription record.

        Raises:
            SubscriptionNotFoundError: If no record exists
        """
        subscription = self._gate.require_subscription(self._state, subscription_id)
        return SubscriptionDetails.from_subscription(subscription, self._clock.block_height())

    def get_user_subscriptions(self, user: Principal | str) -> list[int]:
        """Ids created by ``user`` in creation order; empty if none."""
        return self._by_user.lookup(self._state, Principal.parse(user))

    def get_address_subscriptions(self, address: Principal | str) -> list[int]:
        """Ids that target ``address`` in creation order; empty if none."""
        return self._by_address.lookup(self._state, Principal.parse(address))

    def is_address_monitored(self, address: Principal | str) -> bool:
        """Whether any subscription was ever created on ``address``.

        Cancelled and expired subscriptions still count, since index
        entries are never removed.
        """
        return bool(self.get_address_subscriptions(address))

    def is_subscription_active(self, subscription_id: int) -> bool:
        """Whether the subscription exists and has not expired."""
        return self._gate.subscription_active(self._state, subscription_id, self._clock.block_height())

    def get_subscription_stats(self) -> RegistryStats:
        """Stored usage counters plus the current block height.

        ``active`` is the advisory counter; see ``recount_active_subscriptions``.
        """
        counters = self._state.counters
        return RegistryStats(
            total=counters.total_created,
            active=counters.total_active,
            now=self._clock.block_height(),
        )

    def recount_active_subscriptions(self) -> int:
        """Number of subscriptions active right now, derived from the records."""
        return self._counters.recount_active(self._state, self._clock.block_height())

    def get_subscription_fee(self) -> int:
        return self._state.subscription_fee

    def get_subscription_duration(self) -> int:
        return self._state.subscription_duration

    def get_privileged_owner(self) -> str:
        return str(self._state.privileged_owner)

    def snapshot(self) -> RegistryState:
        """Deep copy of the committed state."""
        return self._state.working_copy()
