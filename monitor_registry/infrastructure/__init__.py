"""Infrastructure layer - Concrete implementations of ports."""

from .block_clock import ManualBlockClock, WallClockBlockHeight
from .bootstrap import build_registry, build_registry_from_env
from .config import RegistrySettings
from .environment_configuration import EnvironmentConfigurationAdapter
from .file_repository import MsgpackFileStateRepository
from .in_memory_event_publisher import InMemoryEventPublisher
from .in_memory_ledger import InMemoryLedger
from .in_memory_metrics import InMemoryMetrics
from .in_memory_repository import InMemoryStateRepository
from .simple_logger import SimpleLogger

__all__ = [
    "EnvironmentConfigurationAdapter",
    "InMemoryEventPublisher",
    "InMemoryLedger",
    "InMemoryMetrics",
    "InMemoryStateRepository",
    "ManualBlockClock",
    "MsgpackFileStateRepository",
    "RegistrySettings",
    "SimpleLogger",
    "WallClockBlockHeight",
    "build_registry",
    "build_registry_from_env",
]
