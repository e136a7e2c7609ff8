"""Domain models for the subscription registry.

The registry state is a single aggregate: every transition is applied to a
deep copy of it and the copy replaces the original only when the whole
transition has succeeded.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .enums import SubscriptionStatus
from .value_objects import MonitoringParameters, Principal


class Subscription(BaseModel):
    """A monitor on one address, owned by one user, valid until ``expiry``.

    Records are never deleted; cancellation moves ``expiry`` to the
    cancellation block so the record stays readable as expired.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(..., ge=1, description="Unique subscription identifier")
    owner: Principal
    monitored_address: Principal
    expiry: int = Field(..., ge=0, description="Block height after which the subscription is inactive")
    parameters: MonitoringParameters
    created_at: int = Field(default=0, ge=0, description="Block height of creation")

    @property
    def alert_frequency(self) -> int:
        return self.parameters.alert_frequency

    @property
    def min_tx_value(self) -> int:
        return self.parameters.min_tx_value

    @property
    def notes(self) -> str:
        return self.parameters.notes

    def is_active(self, now: int) -> bool:
        """Active while the expiry is strictly in the future."""
        return self.expiry > now

    def status(self, now: int) -> SubscriptionStatus:
        """Lifecycle status at block ``now``."""
        return SubscriptionStatus.ACTIVE if self.is_active(now) else SubscriptionStatus.EXPIRED

    def extend(self, duration: int, now: int) -> int:
        """Extend the validity window by ``duration`` blocks.

        Business Rules:
        - An active subscription extends from its current expiry
        - An expired one extends from ``now``; elapsed dead time is not credited

        Returns:
            The new expiry
        """
        self.expiry = max(self.expiry, now) + duration
        return self.expiry

    def reconfigure(self, parameters: MonitoringParameters) -> None:
        """Replace the monitoring parameters; owner, address and expiry are untouched."""
        self.parameters = parameters

    def terminate(self, now: int) -> None:
        """Logically terminate the subscription at block ``now``."""
        self.expiry = now


class UsageCounters(BaseModel):
    """Process-wide usage aggregates.

    ``total_active`` is maintained by the transitions only. A subscription
    that lapses without being renewed or cancelled is still counted, so the
    figure is advisory.
    """

    model_config = ConfigDict(validate_assignment=True)

    total_created: int = Field(default=0, ge=0)
    total_active: int = Field(default=0, ge=0)


class RegistryState(BaseModel):
    """Everything the registry persists."""

    model_config = ConfigDict(validate_assignment=True)

    privileged_owner: Principal
    subscription_duration: int = Field(..., gt=0, description="Validity window in blocks")
    subscription_fee: int = Field(..., gt=0, description="Fee charged on create and renew")
    last_id: int = Field(default=0, ge=0)
    counters: UsageCounters = Field(default_factory=UsageCounters)
    subscriptions: dict[int, Subscription] = Field(default_factory=dict)
    # Keyed by principal string, ids in insertion order
    address_index: dict[str, list[int]] = Field(default_factory=dict)
    user_index: dict[str, list[int]] = Field(default_factory=dict)

    def working_copy(self) -> RegistryState:
        """Deep copy used as the scratch space of a single transition."""
        return self.model_copy(deep=True)


class RegistryStats(BaseModel):
    """Snapshot returned by ``get_subscription_stats``."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(..., ge=0, description="Subscriptions ever created")
    active: int = Field(..., ge=0, description="Advisory count of active subscriptions")
    now: int = Field(..., ge=0, description="Current block height")
