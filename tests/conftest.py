"""Pytest configuration and shared fixtures."""

import logging

import pytest
import pytest_asyncio

from monitor_registry.infrastructure.block_clock import ManualBlockClock
from monitor_registry.infrastructure.bootstrap import build_registry
from monitor_registry.infrastructure.config import RegistrySettings
from monitor_registry.infrastructure.in_memory_event_publisher import InMemoryEventPublisher
from monitor_registry.infrastructure.in_memory_ledger import InMemoryLedger
from monitor_registry.infrastructure.in_memory_metrics import InMemoryMetrics
from monitor_registry.infrastructure.in_memory_repository import InMemoryStateRepository
from monitor_registry.infrastructure.simple_logger import SimpleLogger
from tests.builders import make_principal

START_HEIGHT = 1000
DURATION = 100
FEE = 1000
STARTING_BALANCE = 10**9


@pytest.fixture
def privileged_owner():
    return make_principal(1, "P")


@pytest.fixture
def registry_account():
    return make_principal(2, "P")


@pytest.fixture
def alice():
    return make_principal(100)


@pytest.fixture
def bob():
    return make_principal(101)


@pytest.fixture
def watched_address():
    return make_principal(500)


@pytest.fixture
def clock():
    """Block clock starting at a known height."""
    return ManualBlockClock(START_HEIGHT)


@pytest.fixture
def ledger(alice, bob, privileged_owner):
    """Ledger with funded users and an empty registry account."""
    return InMemoryLedger(
        {alice: STARTING_BALANCE, bob: STARTING_BALANCE, privileged_owner: STARTING_BALANCE}
    )


@pytest.fixture
def settings(privileged_owner, registry_account):
    return RegistrySettings(
        privileged_owner=privileged_owner,
        registry_account=registry_account,
        subscription_duration=DURATION,
        subscription_fee=FEE,
    )


@pytest.fixture
def publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def metrics():
    return InMemoryMetrics()


@pytest.fixture
def repository():
    return InMemoryStateRepository()


@pytest_asyncio.fixture
async def registry(settings, clock, ledger, repository, publisher, metrics):
    """Registry wired to in-memory adapters."""
    return await build_registry(
        settings,
        clock=clock,
        payments=ledger,
        repository=repository,
        publisher=publisher,
        metrics=metrics,
        logger=SimpleLogger(name="monitor_registry.tests", level=logging.DEBUG),
    )
