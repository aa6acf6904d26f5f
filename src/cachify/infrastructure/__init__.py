"""Infrastructure layer implementations for cachify."""

from cachify.infrastructure.backends import (
    DatabaseCacheBackend,
    FilesystemCacheBackend,
    MemoryCacheBackend,
)
from cachify.infrastructure.key_builders import DefaultKeyBuilder
from cachify.infrastructure.metrics import ProcessMetrics
from cachify.infrastructure.serializers import JsonSerializer

__all__ = [
    "DatabaseCacheBackend",
    "FilesystemCacheBackend",
    "MemoryCacheBackend",
    "DefaultKeyBuilder",
    "JsonSerializer",
    "ProcessMetrics",
]
