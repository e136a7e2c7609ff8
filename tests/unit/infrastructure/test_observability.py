"""Tests for the logger, metrics and event publisher adapters."""

import logging

import pytest

from monitor_registry.domain.events import SubscriptionCancelledEvent, SubscriptionFeeChangedEvent
from monitor_registry.infrastructure.in_memory_event_publisher import InMemoryEventPublisher
from monitor_registry.infrastructure.in_memory_metrics import InMemoryMetrics
from monitor_registry.infrastructure.simple_logger import SimpleLogger
from monitor_registry.ports.logger import LogContext


class TestLogContext:
    """Test cases for LogContext."""

    def test_to_dict_drops_unset_fields(self):
        context = LogContext(operation="renew_subscription", block_height=1000)
        assert context.to_dict() == {"operation": "renew_subscription", "block_height": 1000}

    def test_extra_fields_allowed(self):
        context = LogContext(operation="withdraw_fees", amount=10)
        assert context.to_dict()["amount"] == 10

    def test_with_error_returns_copy(self):
        context = LogContext(operation="cancel_subscription")
        failed = context.with_error("NOT_FOUND")

        assert failed.error_code == "NOT_FOUND"
        assert context.error_code is None


class TestSimpleLogger:
    """Test cases for SimpleLogger."""

    def test_context_rendered_into_message(self, caplog):
        logger = SimpleLogger(name="monitor_registry.tests.logger", level=logging.DEBUG)

        with caplog.at_level(logging.DEBUG, logger="monitor_registry.tests.logger"):
            logger.info("Subscription created", LogContext(operation="create_subscription", subscription_id=1))

        record = caplog.records[-1]
        assert record.getMessage() == "Subscription created [operation=create_subscription subscription_id=1]"
        assert record.registry == {"operation": "create_subscription", "subscription_id": 1}

    def test_message_without_context(self, caplog):
        logger = SimpleLogger(name="monitor_registry.tests.logger", level=logging.DEBUG)

        with caplog.at_level(logging.DEBUG, logger="monitor_registry.tests.logger"):
            logger.warning("plain")

        assert caplog.records[-1].getMessage() == "plain"
        assert caplog.records[-1].levelno == logging.WARNING

    def test_level_filters(self, caplog):
        logger = SimpleLogger(name="monitor_registry.tests.quiet", level=logging.ERROR)

        with caplog.at_level(logging.ERROR, logger="monitor_registry.tests.quiet"):
            logger.debug("hidden")
            logger.error("shown")

        assert [r.getMessage() for r in caplog.records] == ["shown"]


class TestInMemoryMetrics:
    """Test cases for InMemoryMetrics."""

    def test_counters_and_gauges(self):
        metrics = InMemoryMetrics()
        metrics.increment("registry.create_subscription.success")
        metrics.increment("registry.create_subscription.success", 2)
        metrics.gauge("registry.subscriptions.total", 5)

        assert metrics.counter("registry.create_subscription.success") == 3
        assert metrics.counter("never") == 0
        assert metrics.get_all()["gauges"] == {"registry.subscriptions.total": 5}

    def test_timer_records_even_on_error(self):
        metrics = InMemoryMetrics()

        with metrics.timer("op.latency_ms"):
            pass
        with pytest.raises(RuntimeError):
            with metrics.timer("op.latency_ms"):
                raise RuntimeError("boom")

        timing = metrics.get_all()["timings"]["op.latency_ms"]
        assert timing["count"] == 2
        assert timing["max"] >= timing["average"] >= 0

    def test_reset(self):
        metrics = InMemoryMetrics()
        metrics.increment("a")
        metrics.reset()
        assert metrics.get_all() == {"counters": {}, "gauges": {}, "timings": {}}


class TestInMemoryEventPublisher:
    """Test cases for InMemoryEventPublisher."""

    @pytest.mark.asyncio
    async def test_publish_keeps_order(self):
        publisher = InMemoryEventPublisher()
        first = SubscriptionCancelledEvent(block_height=1, subscription_id=1, was_active=True)
        second = SubscriptionFeeChangedEvent(block_height=2, old_fee=1, new_fee=2)

        await publisher.publish(first)
        await publisher.publish(second)

        assert publisher.events == [first, second]
        assert publisher.of_type("SubscriptionFeeChanged") == [second]

        publisher.clear()
        assert publisher.events == []
