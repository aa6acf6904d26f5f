"""Domain services for cachify."""

from cachify.core.services.cache_service import CacheService
from cachify.core.services.signature import (
    SIGNATURE_MARKER,
    SignatureGenerator,
)

__all__ = [
    "CacheService",
    "SignatureGenerator",
    "SIGNATURE_MARKER",
]
