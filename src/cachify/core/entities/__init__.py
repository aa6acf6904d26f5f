"""Domain entities for cachify."""

from cachify.core.entities.cache_config import CacheConfig
from cachify.core.entities.cache_entry import (
    CacheEntry,
    EntryMeta,
    PageMetrics,
    PrintOutcome,
)
from cachify.core.entities.cache_key import CacheKey

__all__ = [
    "CacheEntry",
    "CacheKey",
    "CacheConfig",
    "EntryMeta",
    "PageMetrics",
    "PrintOutcome",
]
