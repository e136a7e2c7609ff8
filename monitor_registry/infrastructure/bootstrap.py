"""Bootstrap module for wiring a registry with default adapters."""

from __future__ import annotations

from ..application.registry import SubscriptionRegistry
from ..ports.clock import BlockClockPort
from ..ports.event_publisher import EventPublisherPort
from ..ports.logger import LoggerPort
from ..ports.metrics import MetricsPort
from ..ports.payment import PaymentPort
from ..ports.repository import RegistryStateRepository
from .block_clock import ManualBlockClock
from .config import RegistrySettings
from .environment_configuration import EnvironmentConfigurationAdapter
from .file_repository import MsgpackFileStateRepository
from .in_memory_event_publisher import InMemoryEventPublisher
from .in_memory_ledger import InMemoryLedger
from .in_memory_metrics import InMemoryMetrics
from .in_memory_repository import InMemoryStateRepository
from .simple_logger import SimpleLogger


def default_repository(settings: RegistrySettings) -> RegistryStateRepository:
    """File repository when ``state_path`` is set, in-memory otherwise."""
    if settings.state_path:
        return MsgpackFileStateRepository(settings.state_path)
    return InMemoryStateRepository()


async def build_registry(
    settings: RegistrySettings,
    *,
    clock: BlockClockPort | None = None,
    payments: PaymentPort | None = None,
    repository: RegistryStateRepository | None = None,
    publisher: EventPublisherPort | None = None,
    logger: LoggerPort | None = None,
    metrics: MetricsPort | None = None,
) -> SubscriptionRegistry:
    """Create a registry, filling every port that is not given with a default.

    Args:
        settings: Deployment configuration
        clock: Block height source (default: ManualBlockClock at 0)
        payments: Payment rail (default: empty InMemoryLedger)
        repository: State repository (default: from ``settings.state_path``)
        publisher: Event sink (default: InMemoryEventPublisher)
        logger: Logger (default: SimpleLogger at ``settings.log_level``)
        metrics: Metrics collector (default: InMemoryMetrics)

    Returns:
        A registry loaded from, or initialized into, the repository
    """
    return await SubscriptionRegistry.open(
        privileged_owner=settings.privileged_owner,
        registry_account=settings.registry_account,
        subscription_duration=settings.subscription_duration,
        subscription_fee=settings.subscription_fee,
        clock=clock or ManualBlockClock(),
        payments=payments or InMemoryLedger(),
        repository=repository or default_repository(settings),
        publisher=publisher or InMemoryEventPublisher(),
        logger=logger or SimpleLogger(level=settings.log_level_value),
        metrics=metrics or InMemoryMetrics(),
        address_index_capacity=settings.address_index_capacity,
        user_index_capacity=settings.user_index_capacity,
    )


async def build_registry_from_env(**ports) -> SubscriptionRegistry:
    """Create a registry configured from ``MONITOR_REGISTRY_*`` variables."""
    settings = EnvironmentConfigurationAdapter().get_registry_settings()
    return await build_registry(settings, **ports)
