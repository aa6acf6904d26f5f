"""Cache service - main orchestrator for caching operations."""

import logging
from typing import IO

from cachify.core.entities.cache_config import CacheConfig
from cachify.core.entities.cache_entry import CacheEntry, PrintOutcome
from cachify.core.entities.cache_key import CacheKey
from cachify.core.interfaces.cache_backend import ICacheBackend
from cachify.core.interfaces.key_builder import IKeyBuilder

logger = logging.getLogger(__name__)


class CacheService:
    """Domain service that orchestrates page caching.

    This is the entry point for request handling code: it derives the
    request key, serves hits, stores rendered pages with the configured
    lifetime and signature mode, and invalidates entries.
    """

    def __init__(
        self,
        backend: ICacheBackend,
        key_builder: IKeyBuilder,
        config: CacheConfig | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            backend: The cache backend to use for storage.
            key_builder: The key builder for deriving request keys.
            config: Optional cache configuration. Uses defaults if not provided.
        """
        self._backend = backend
        self._key_builder = key_builder
        self._config = config or CacheConfig()

        # Statistics
        self._hits = 0
        self._misses = 0

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def backend(self) -> ICacheBackend:
        return self._backend

    @property
    def stats(self) -> dict[str, int]:
        """Get hit/miss statistics.

        Returns:
            Dictionary with hits, misses, and total requests.
        """
        return {
            "hits": self._hits,
            "misses": self._misses,
            "total": self._hits + self._misses,
        }

    def key_for(self, host: str, uri: str, scheme: str = "http") -> CacheKey:
        """Derive the cache key of a request."""
        return self._key_builder.build(host, uri, scheme=scheme)

    def get_cached_page(self, key: CacheKey) -> CacheEntry | str | None:
        """Look up the stored entry of a request.

        Returns:
            The backend's entry, or None if not found or disabled.
        """
        if not self._config.enabled:
            return None

        entry = self._backend.get_item(key)
        if entry is None:
            self._misses += 1
        else:
            self._hits += 1
        return entry

    def serve(self, key: CacheKey, stream: IO[str] | None = None) -> PrintOutcome:
        """Write the cached page of a request if there is one.

        Returns:
            SERVED when the response has been written and request handling
            must stop, PASSTHROUGH when the page has to be rendered.
        """
        entry = self.get_cached_page(key)
        if entry is None:
            return PrintOutcome.PASSTHROUGH

        outcome = self._backend.print_cache(self._config.sig_detail, entry, stream)
        if not outcome.served:
            logger.debug("Unusable cache entry for %s", key.uri)
        return outcome

    def store(self, key: CacheKey, body: str, lifetime: int | None = None) -> None:
        """Cache a rendered page.

        Args:
            key: The request key.
            body: The rendered page.
            lifetime: Seconds to keep the page, the configured lifetime
                by default.
        """
        if not self._config.enabled:
            return

        effective_lifetime = self._config.lifetime if lifetime is None else lifetime
        self._backend.store_item(key, body, effective_lifetime, self._config.sig_detail)

    def invalidate(self, key: CacheKey, url: str | None = None) -> None:
        """Drop the cached page of a request.

        Args:
            key: The request key.
            url: Permalink of the page, used by path based backends.
        """
        self._backend.delete_item(key, url)

    def flush(self) -> None:
        """Clear all cached pages."""
        self._backend.clear_cache()
        self._hits = 0
        self._misses = 0

    def size(self) -> int | None:
        """Return the cache size in bytes, or None if unknown."""
        return self._backend.get_stats()
