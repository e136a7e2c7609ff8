"""Application layer - Registry service and read models."""

from .dtos import SubscriptionDetails
from .registry import SubscriptionRegistry

__all__ = ["SubscriptionDetails", "SubscriptionRegistry"]
