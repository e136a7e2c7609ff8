"""In-memory metrics implementation following hexagonal architecture.

This is a pure infrastructure implementation that doesn't depend on
application or domain layers, only on the metrics port interface.
"""

import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Any

from ..ports.metrics import MetricsPort


class TimingSummary:
    """Running summary of recorded durations."""

    def __init__(self):
        self.count: int = 0
        self.total: float = 0.0
        self.max: float = 0.0

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.max = max(self.max, value)

    @property
    def average(self) -> float:
        return self.total / self.count if self.count > 0 else 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "count": self.count,
            "average": round(self.average, 3),
            "max": round(self.max, 3),
        }


class InMemoryMetrics(MetricsPort):
    """In-memory implementation of the MetricsPort."""

    def __init__(self):
        self._counters: dict[str, int] = defaultdict(int)
        self._gauges: dict[str, float] = {}
        self._timings: dict[str, TimingSummary] = defaultdict(TimingSummary)

    def increment(self, name: str, value: int = 1) -> None:
        """Increment a counter metric."""
        self._counters[name] += value

    def gauge(self, name: str, value: float) -> None:
        """Set a gauge metric."""
        self._gauges[name] = value

    @contextmanager
    def timer(self, name: str):
        """Record the duration of the wrapped block, even if it raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self._timings[name].add((time.perf_counter() - start) * 1000)

    def counter(self, name: str) -> int:
        """Current value of a counter (0 if never incremented)."""
        return self._counters.get(name, 0)

    def get_all(self) -> dict[str, Any]:
        """Get all metrics as a dictionary."""
        return {
            "counters": dict(self._counters),
            "gauges": dict(self._gauges),
            "timings": {name: summary.to_dict() for name, summary in self._timings.items()},
        }

    def reset(self) -> None:
        """Reset all metrics."""
        self._counters.clear()
        self._gauges.clear()
        self._timings.clear()
