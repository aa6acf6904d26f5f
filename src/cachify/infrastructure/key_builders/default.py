"""Default key builder implementation."""

from urllib.parse import urlsplit

from cachify.core.entities.cache_config import CacheConfig
from cachify.core.entities.cache_key import CacheKey
from cachify.utils.hashing import HASH_SUFFIX, hash_url


class DefaultKeyBuilder:
    """Default key builder for page requests.

    Hash addresses are the MD5 of the full URL plus a fixed suffix.
    Path addresses are ``host`` followed by the URL path, normalized to a
    single trailing slash, which matches what a reverse proxy sees as
    ``$host$uri``.
    """

    def __init__(self, suffix: str = HASH_SUFFIX) -> None:
        """Initialize the key builder.

        Args:
            suffix: Tag appended to every hash address.
        """
        self._suffix = suffix

    @classmethod
    def from_config(cls, config: CacheConfig) -> "DefaultKeyBuilder":
        """Create a key builder using the configured hash suffix."""
        return cls(suffix=config.hash_suffix)

    @property
    def suffix(self) -> str:
        return self._suffix

    def build(self, host: str, uri: str, scheme: str = "http") -> CacheKey:
        """Build the request identity.

        Args:
            host: The request host.
            uri: The request URI including the query string.
            scheme: The request scheme.

        Returns:
            A CacheKey for the request.
        """
        return CacheKey.from_request(
            host,
            uri,
            scheme=scheme,
            hash_func=lambda url: hash_url(url, suffix=self._suffix),
        )

    def path_for(self, key: CacheKey, path: str | None = None) -> str:
        """Build the hierarchical address of a request.

        Args:
            key: The request identity.
            path: Optional URL or URI overriding ``key.uri``, e.g. the
                permalink of a post being invalidated.

        Returns:
            ``host/path/`` with exactly one trailing slash.
        """
        url_path = urlsplit(path or key.uri).path
        return f"{key.host}{url_path}".rstrip("/") + "/"
