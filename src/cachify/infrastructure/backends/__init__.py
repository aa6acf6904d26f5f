"""Cache backend implementations.

The Redis backend needs the optional ``redis`` package and is imported
from :mod:`cachify.infrastructure.backends.redis` directly.
"""

from cachify.infrastructure.backends.base import BaseCacheBackend, FlatCacheBackend
from cachify.infrastructure.backends.database import DatabaseCacheBackend
from cachify.infrastructure.backends.filesystem import FilesystemCacheBackend
from cachify.infrastructure.backends.memory import MemoryCacheBackend

__all__ = [
    "BaseCacheBackend",
    "FlatCacheBackend",
    "DatabaseCacheBackend",
    "FilesystemCacheBackend",
    "MemoryCacheBackend",
]
