"""Ports layer - Interfaces for external collaborators."""

from .clock import BlockClockPort
from .event_publisher import EventPublisherPort
from .logger import LoggerPort
from .metrics import MetricsPort
from .payment import PaymentPort
from .repository import RegistryStateRepository

__all__ = [
    "BlockClockPort",
    "EventPublisherPort",
    "LoggerPort",
    "MetricsPort",
    "PaymentPort",
    "RegistryStateRepository",
]
