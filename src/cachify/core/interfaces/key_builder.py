"""Key builder interface."""

from typing import Protocol

from cachify.core.entities.cache_key import CacheKey


class IKeyBuilder(Protocol):
    """Contract for deriving cache addresses from a request.

    Key builders create the hash address used by flat-namespace backends
    and the path address used by hierarchical backends.
    """

    def build(self, host: str, uri: str, scheme: str = "http") -> CacheKey:
        """Build the request identity.

        Args:
            host: The request host.
            uri: The request URI.
            scheme: The request scheme.

        Returns:
            A CacheKey holding the hash address and the raw components.
        """
        ...

    def path_for(self, key: CacheKey, path: str | None = None) -> str:
        """Build the hierarchical address of a request.

        Args:
            key: The request identity.
            path: Optional URL or URI overriding ``key.uri``.

        Returns:
            ``host/path/`` with a single trailing slash.
        """
        ...
