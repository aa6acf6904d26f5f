"""Hashing utilities for cache key generation."""

import hashlib

HASH_SUFFIX = ".cachify"


def hash_url(url: str, suffix: str = HASH_SUFFIX) -> str:
    """Create the hash address of a URL.

    The suffix tags the address as ours so that shared stores can be
    flushed selectively.

    Args:
        url: The full request URL.
        suffix: Tag appended to the digest.

    Returns:
        The MD5 hex digest followed by ``suffix``.
    """
    return hashlib.md5(url.encode()).hexdigest() + suffix
