"""Core domain layer for cachify."""

from cachify.core.entities import CacheConfig, CacheEntry, CacheKey, PrintOutcome
from cachify.core.interfaces import (
    ICacheBackend,
    IKeyBuilder,
    IMetricsProvider,
    ISerializer,
)
from cachify.core.services import CacheService, SignatureGenerator

__all__ = [
    # Entities
    "CacheConfig",
    "CacheEntry",
    "CacheKey",
    "PrintOutcome",
    # Interfaces
    "ICacheBackend",
    "IKeyBuilder",
    "IMetricsProvider",
    "ISerializer",
    # Services
    "CacheService",
    "SignatureGenerator",
]
