"""Behaviour shared by the bundled cache backends."""

import logging
import sys
from abc import ABC, abstractmethod
from typing import IO

from cachify.core.entities.cache_entry import CacheEntry, PrintOutcome
from cachify.core.entities.cache_key import CacheKey
from cachify.core.services.signature import SignatureGenerator

logger = logging.getLogger(__name__)


class BaseCacheBackend(ABC):
    """Abstract base for the bundled ICacheBackend implementations.

    Subclasses provide storage. The base class owns the signature
    generator, the empty input guard and the writing of cached pages.
    """

    method: str = ""

    def __init__(self, signature: SignatureGenerator | None = None) -> None:
        self._signature = signature or SignatureGenerator()

    @property
    def signature(self) -> SignatureGenerator:
        return self._signature

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the backend can be used in this environment."""

    def stringify_method(self) -> str:
        return self.method

    @abstractmethod
    def store_item(
        self,
        key: CacheKey,
        data: str,
        lifetime: int,
        sig_detail: bool = False,
    ) -> None:
        """Store rendered output under ``key``."""

    @abstractmethod
    def get_item(self, key: CacheKey) -> CacheEntry | str | None:
        """Return the stored entry or None."""

    @abstractmethod
    def delete_item(self, key: CacheKey, url: str | None = None) -> None:
        """Delete the entry of ``key``."""

    @abstractmethod
    def clear_cache(self) -> None:
        """Remove every entry owned by this backend."""

    @abstractmethod
    def get_stats(self) -> int | None:
        """Return the cache size in bytes or None."""

    def print_cache(
        self,
        sig_detail: bool,
        entry: CacheEntry | str | None,
        stream: IO[str] | None = None,
    ) -> PrintOutcome:
        """Write a structured entry and a freshly rendered signature."""
        if not isinstance(entry, CacheEntry) or not entry.data:
            return PrintOutcome.PASSTHROUGH

        out = stream if stream is not None else sys.stdout
        out.write(entry.data)
        # Signature may show the counters of this request, so it is built now
        if entry.meta is not None:
            out.write(self._signature.for_entry(sig_detail, entry.meta, self.method))
        return PrintOutcome.SERVED

    def _accepts(self, data: str) -> bool:
        """Guard against storing empty pages."""
        if not data:
            logger.warning("%s.store_item: Empty input.", type(self).__name__)
            return False
        return True


class FlatCacheBackend(BaseCacheBackend):
    """Base for backends storing the page with the signature embedded."""

    def print_cache(
        self,
        sig_detail: bool,
        entry: CacheEntry | str | None,
        stream: IO[str] | None = None,
    ) -> PrintOutcome:
        """Write a stored page as is."""
        if not isinstance(entry, str) or not entry:
            return PrintOutcome.PASSTHROUGH

        out = stream if stream is not None else sys.stdout
        out.write(entry)
        return PrintOutcome.SERVED

    def _sign(self, data: str, sig_detail: bool) -> str:
        """Append a store time signature to ``data``."""
        label = self.method if sig_detail else "Generated"
        return data + self._signature.brief(label=label)
