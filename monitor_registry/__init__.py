"""monitor-registry - Fee-gated registry of address-monitoring subscriptions."""

from .application.registry import SubscriptionRegistry
from .infrastructure.bootstrap import build_registry
from .infrastructure.config import RegistrySettings

__all__ = ["RegistrySettings", "SubscriptionRegistry", "build_registry"]
__version__ = "0.1.0"
