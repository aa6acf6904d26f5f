"""Cache key value object."""

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class CacheKey:
    """Immutable request identity.

    Carries both addressing modes: ``hash`` is the opaque address used by
    flat-namespace backends, while ``host`` and ``uri`` are what
    path-addressed backends build their hierarchical key from.
    """

    hash: str
    host: str
    uri: str

    def __str__(self) -> str:
        """Return the hash address."""
        return self.hash

    @classmethod
    def from_request(
        cls,
        host: str,
        uri: str,
        scheme: str = "http",
        hash_func: Callable[[str], str] | None = None,
    ) -> "CacheKey":
        """Create a CacheKey from raw request components.

        Args:
            host: The request host (``HTTP_HOST``).
            uri: The request URI including query string.
            scheme: ``http`` or ``https``.
            hash_func: Optional custom hash function for the full URL.

        Returns:
            A new CacheKey instance.
        """
        from cachify.utils.hashing import hash_url

        hasher = hash_func or hash_url
        return cls(hash=hasher(f"{scheme}://{host}{uri}"), host=host, uri=uri)
