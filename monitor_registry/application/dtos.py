"""Data Transfer Objects returned by the registry's read operations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import SubscriptionStatus
from ..domain.models import Subscription


class SubscriptionDetails(BaseModel):
    """Flat, read-only view of a subscription record."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Subscription identifier")
    owner: str = Field(..., description="Owning principal")
    monitored_address: str = Field(..., description="Watched principal")
    expiry: int = Field(..., description="Block height after which it is inactive")
    alert_frequency: int
    min_tx_value: int
    track_stx: bool
    track_assets: bool
    track_calls: bool
    notes: str
    created_at: int
    status: SubscriptionStatus = Field(..., description="Status at the block the view was taken")

    @property
    def is_active(self) -> bool:
        return self.status is SubscriptionStatus.ACTIVE

    @classmethod
    def from_subscription(cls, subscription: Subscription, now: int) -> SubscriptionDetails:
        """Build the view of ``subscription`` as of block ``now``."""
        parameters = subscription.parameters
        return cls(
            id=subscription.id,
            owner=str(subscription.owner),
            monitored_address=str(subscription.monitored_address),
            expiry=subscription.expiry,
            alert_frequency=parameters.alert_frequency,
            min_tx_value=parameters.min_tx_value,
            track_stx=parameters.track_stx,
            track_assets=parameters.track_assets,
            track_calls=parameters.track_calls,
            notes=parameters.notes,
            created_at=subscription.created_at,
            status=subscription.status(now),
        )
