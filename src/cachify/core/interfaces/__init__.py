"""Core interfaces (Protocol classes) for cachify."""

from cachify.core.interfaces.cache_backend import ICacheBackend
from cachify.core.interfaces.key_builder import IKeyBuilder
from cachify.core.interfaces.metrics import IMetricsProvider
from cachify.core.interfaces.serializer import ISerializer

__all__ = [
    "ICacheBackend",
    "IKeyBuilder",
    "IMetricsProvider",
    "ISerializer",
]
