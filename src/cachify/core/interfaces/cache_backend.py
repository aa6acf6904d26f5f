"""Cache backend interface."""

from typing import IO, Protocol

from cachify.core.entities.cache_entry import CacheEntry, PrintOutcome
from cachify.core.entities.cache_key import CacheKey


class ICacheBackend(Protocol):
    """Contract for page cache storage backends.

    All cache backends must implement this protocol to be used with
    CacheService. Backends absorb their own transport failures: reads
    resolve to None and writes are skipped, so callers can always fall
    back to rendering the page.
    """

    def is_available(self) -> bool:
        """Check whether the backend can be used in this environment.

        Must not have side effects and must be safe to call before any
        connection has been made.
        """
        ...

    def stringify_method(self) -> str:
        """Return a short human readable name of the backend."""
        ...

    def store_item(
        self,
        key: CacheKey,
        data: str,
        lifetime: int,
        sig_detail: bool = False,
    ) -> None:
        """Store rendered output.

        Empty ``data`` is rejected with a logged warning and leaves the
        existing entry untouched.

        Args:
            key: The request identity.
            data: The rendered page.
            lifetime: Seconds until the entry expires.
            sig_detail: Whether an embedded signature shows details.
        """
        ...

    def get_item(self, key: CacheKey) -> CacheEntry | str | None:
        """Retrieve a stored entry.

        Args:
            key: The request identity.

        Returns:
            A CacheEntry for structured backends, the signed page string
            for flat backends, or None on miss, expiry or failure.
        """
        ...

    def delete_item(self, key: CacheKey, url: str | None = None) -> None:
        """Delete a stored entry. Missing entries are ignored.

        Args:
            key: The request identity.
            url: Optional URL used to recompute path based addresses.
        """
        ...

    def clear_cache(self) -> None:
        """Remove every entry owned by this backend."""
        ...

    def get_stats(self) -> int | None:
        """Return the approximate cache size in bytes, or None if unknown."""
        ...

    def print_cache(
        self,
        sig_detail: bool,
        entry: CacheEntry | str | None,
        stream: IO[str] | None = None,
    ) -> PrintOutcome:
        """Write a cached entry to the response stream.

        Args:
            sig_detail: Whether the signature shows details.
            entry: The value returned by ``get_item``.
            stream: Output stream, ``sys.stdout`` by default.

        Returns:
            SERVED once the response is written, PASSTHROUGH when the
            entry is not a usable cached value.
        """
        ...
