"""Domain events emitted by committed registry transitions."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DomainEvent(BaseModel):
    """Base class for domain events.

    Domain events represent something that has happened in the registry.
    They are immutable facts that can be used for auditing and integration.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    event_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique event identifier",
    )
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Wall-clock time the event was recorded",
    )
    block_height: int = Field(..., ge=0, description="Block height the transition ran at")
    aggregate_id: str = Field(..., description="ID of the aggregate that emitted this event")
    aggregate_type: str = Field(..., description="Type of the aggregate")
    event_type: str = Field(..., description="Type of the event")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional event metadata")


class SubscriptionCreatedEvent(DomainEvent):
    """Event emitted when a subscription is created."""

    subscription_id: int
    owner: str
    monitored_address: str
    expiry: int
    fee_paid: int

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "SubscriptionCreated"
        data["aggregate_type"] = "Subscription"
        data.setdefault("aggregate_id", str(data.get("subscription_id")))
        super().__init__(**data)


class SubscriptionRenewedEvent(DomainEvent):
    """Event emitted when a subscription is renewed."""

    subscription_id: int
    previous_expiry: int
    new_expiry: int
    reactivated: bool
    fee_paid: int

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "SubscriptionRenewed"
        data["aggregate_type"] = "Subscription"
        data.setdefault("aggregate_id", str(data.get("subscription_id")))
        super().__init__(**data)


class SubscriptionUpdatedEvent(DomainEvent):
    """Event emitted when monitoring parameters change."""

    subscription_id: int
    alert_frequency: int
    min_tx_value: int
    track_stx: bool
    track_assets: bool
    track_calls: bool

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "SubscriptionUpdated"
        data["aggregate_type"] = "Subscription"
        data.setdefault("aggregate_id", str(data.get("subscription_id")))
        super().__init__(**data)


class SubscriptionCancelledEvent(DomainEvent):
    """Event emitted when a subscription is cancelled."""

    subscription_id: int
    was_active: bool

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "SubscriptionCancelled"
        data["aggregate_type"] = "Subscription"
        data.setdefault("aggregate_id", str(data.get("subscription_id")))
        super().__init__(**data)


class FeesWithdrawnEvent(DomainEvent):
    """Event emitted when the privileged owner withdraws fees."""

    amount: int
    recipient: str

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "FeesWithdrawn"
        data["aggregate_type"] = "Registry"
        data.setdefault("aggregate_id", "registry")
        super().__init__(**data)


class SubscriptionDurationChangedEvent(DomainEvent):
    """Event emitted when the subscription duration is changed."""

    old_duration: int
    new_duration: int

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "SubscriptionDurationChanged"
        data["aggregate_type"] = "Registry"
        data.setdefault("aggregate_id", "registry")
        super().__init__(**data)


class SubscriptionFeeChangedEvent(DomainEvent):
    """Event emitted when the subscription fee is changed."""

    old_fee: int
    new_fee: int

    def __init__(self, **data: Any) -> None:
        """Initialize with proper event type."""
        data["event_type"] = "SubscriptionFeeChanged"
        data["aggregate_type"] = "Registry"
        data.setdefault("aggregate_id", "registry")
        super().__init__(**data)
