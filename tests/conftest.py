"""Pytest configuration for cachify tests."""

import io

import pytest

from cachify.core.entities import CacheKey, PageMetrics
from cachify.infrastructure.key_builders.default import DefaultKeyBuilder


class FixedMetrics:
    """Metrics provider returning preset counters."""

    def __init__(self, queries: int = 5, timer: float = 0.02, memory: str = "1MB") -> None:
        self.metrics = PageMetrics(queries=queries, timer=timer, memory=memory)

    def current(self) -> PageMetrics:
        return self.metrics


@pytest.fixture(autouse=True)
def reset_filters():
    """Reset registered hook filters after each test."""
    import cachify.hooks

    original = {name: list(entries) for name, entries in cachify.hooks._FILTERS.items()}

    yield

    cachify.hooks._FILTERS.clear()
    cachify.hooks._FILTERS.update(original)


@pytest.fixture
def key_builder() -> DefaultKeyBuilder:
    return DefaultKeyBuilder()


@pytest.fixture
def key(key_builder: DefaultKeyBuilder) -> CacheKey:
    """Key of a typical blog post request."""
    return key_builder.build("example.com", "/2024/hello-world/")


@pytest.fixture
def other_key(key_builder: DefaultKeyBuilder) -> CacheKey:
    return key_builder.build("example.com", "/about/")


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def fixed_metrics():
    """Factory for metrics providers returning preset counters."""
    return FixedMetrics
