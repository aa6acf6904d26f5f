"""In-memory cache backend implementation."""

import math
import threading
from dataclasses import dataclass
from typing import Any

from cachetools import TLRUCache  # type: ignore[import-untyped]

from cachify.core.entities.cache_entry import CacheEntry
from cachify.core.entities.cache_key import CacheKey
from cachify.core.services.signature import SignatureGenerator
from cachify.infrastructure.backends.base import BaseCacheBackend


@dataclass(frozen=True)
class MemorySlot:
    """Value kept in the cache: the entry and its lifetime."""

    entry: CacheEntry
    lifetime: int


def slot_ttu(key: Any, value: Any, now: float) -> float:
    """Compute the expiry time of a cache value for TLRUCache.

    A lifetime of 0 and values stored by others never expire.
    """
    lifetime = getattr(value, "lifetime", 0)
    if lifetime <= 0:
        return math.inf
    return now + lifetime


class MemoryCacheBackend(BaseCacheBackend):
    """In-process cache backend with per-item TTL.

    Suitable for single-process deployments. Uses cachetools TLRUCache,
    so each entry expires after its own lifetime and the least recently
    used entries are evicted once ``maxsize`` is reached.

    A cache object may be shared with other code; this backend only
    touches the keys it has written itself.
    """

    method = "Memory"

    def __init__(
        self,
        maxsize: int = 1000,
        cache: TLRUCache | None = None,
        signature: SignatureGenerator | None = None,
    ) -> None:
        """Initialize the in-memory cache backend.

        Args:
            maxsize: Maximum number of items when creating the cache.
            cache: Existing TLRUCache to use instead, built with
                ``ttu=slot_ttu``.
            signature: Signature generator for printed entries.
        """
        super().__init__(signature)
        self._cache: TLRUCache = cache if cache is not None else TLRUCache(
            maxsize=maxsize,
            ttu=slot_ttu,
        )
        self._lock = threading.RLock()
        self._names: set[str] = set()

    def is_available(self) -> bool:
        return True

    def store_item(
        self,
        key: CacheKey,
        data: str,
        lifetime: int,
        sig_detail: bool = False,
    ) -> None:
        """Store the page with the counters of the rendering request."""
        if not self._accepts(data):
            return

        entry = CacheEntry(data=data, meta=self._signature.capture_meta())
        with self._lock:
            self._cache[key.hash] = MemorySlot(entry=entry, lifetime=lifetime)
            self._names.add(key.hash)
            if len(self._names) > self._cache.maxsize:
                self._forget_dropped()

    def get_item(self, key: CacheKey) -> CacheEntry | None:
        with self._lock:
            slot = self._cache.get(key.hash)
        return slot.entry if isinstance(slot, MemorySlot) else None

    def delete_item(self, key: CacheKey, url: str | None = None) -> None:
        with self._lock:
            self._cache.pop(key.hash, None)
            self._names.discard(key.hash)

    def clear_cache(self) -> None:
        with self._lock:
            for name in self._names:
                self._cache.pop(name, None)
            self._names.clear()

    def get_stats(self) -> int | None:
        """Return the summed UTF-8 size of all stored pages."""
        with self._lock:
            self._cache.expire()
            slots = [self._cache.get(name) for name in self._own_keys()]
        sizes = [
            len(slot.entry.data.encode("utf-8", "surrogatepass"))
            for slot in slots
            if isinstance(slot, MemorySlot)
        ]
        return sum(sizes) if sizes else None

    def _own_keys(self) -> list[str]:
        self._forget_dropped()
        return list(self._names)

    def _forget_dropped(self) -> None:
        """Drop names of entries the cache has expired or evicted."""
        self._names.intersection_update(self._cache.keys())

    def __len__(self) -> int:
        """Return the number of our entries in the cache."""
        with self._lock:
            self._cache.expire()
            return len(self._own_keys())

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return int(self._cache.maxsize)
