"""Cachify - Full page output cache with pluggable storage backends.

Rendered pages are stored under a key derived from the request and
served from the cache on later identical requests. Backends keep pages
in process memory, a relational database, static files or Redis, and all
of them degrade to "not cached" when their store is unreachable.

Example:
    from cachify import CacheConfig, CacheService, DefaultKeyBuilder
    from cachify.registry import select_backend

    config = CacheConfig(method="HDD", lifetime=3600)
    service = CacheService(
        backend=select_backend(config),
        key_builder=DefaultKeyBuilder.from_config(config),
        config=config,
    )

    key = service.key_for(environ["HTTP_HOST"], environ["REQUEST_URI"])
    if service.serve(key, stream=response).served:
        return
    body = render_page()
    service.store(key, body)
"""

from cachify.core.entities import (
    CacheConfig,
    CacheEntry,
    CacheKey,
    EntryMeta,
    PageMetrics,
    PrintOutcome,
)
from cachify.core.interfaces import (
    ICacheBackend,
    IKeyBuilder,
    IMetricsProvider,
    ISerializer,
)
from cachify.core.services import CacheService, SignatureGenerator
from cachify.infrastructure import (
    DatabaseCacheBackend,
    DefaultKeyBuilder,
    FilesystemCacheBackend,
    JsonSerializer,
    MemoryCacheBackend,
    ProcessMetrics,
)
from cachify.registry import create_backend, register_backend, select_backend

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheConfig",
    "CacheEntry",
    "CacheKey",
    "EntryMeta",
    "PageMetrics",
    "PrintOutcome",
    # Core interfaces
    "ICacheBackend",
    "IKeyBuilder",
    "IMetricsProvider",
    "ISerializer",
    # Core services
    "CacheService",
    "SignatureGenerator",
    # Infrastructure implementations
    "DatabaseCacheBackend",
    "FilesystemCacheBackend",
    "MemoryCacheBackend",
    "DefaultKeyBuilder",
    "JsonSerializer",
    "ProcessMetrics",
    # Backend selection
    "create_backend",
    "register_backend",
    "select_backend",
]
