"""Metrics provider interface."""

from typing import Protocol

from cachify.core.entities.cache_entry import PageMetrics


class IMetricsProvider(Protocol):
    """Contract for reading the performance counters of the current request."""

    def current(self) -> PageMetrics:
        """Return the counters as of now."""
        ...
