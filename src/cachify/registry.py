"""Backend registry and selection.

Backends are registered by their method name. ``select_backend`` picks
the configured one at startup and falls back to the database backend
when it is not usable in the current environment.
"""

import logging
from collections.abc import Callable
from threading import Lock
from typing import Any

from cachify.core.entities.cache_config import CacheConfig
from cachify.core.interfaces.cache_backend import ICacheBackend
from cachify.core.services.signature import SignatureGenerator
from cachify.infrastructure.metrics import ProcessMetrics

logger = logging.getLogger(__name__)

FALLBACK_METHOD = "DB"

BackendFactory = Callable[..., ICacheBackend]

_REGISTRY: dict[str, BackendFactory] = {}
_LOCK = Lock()


class BackendNotFoundError(LookupError):
    """Raised when no backend is registered under a name."""


def _normalize(name: str) -> str:
    return name.strip().lower()


def register_backend(name: str, factory: BackendFactory, *, overwrite: bool = False) -> None:
    """Register a backend factory under ``name``.

    The factory is called as ``factory(config, **kwargs)``.

    Raises:
        ValueError: If ``name`` is empty or already taken.
    """
    key = _normalize(name)
    if not key:
        raise ValueError("Backend name must be non-empty")

    with _LOCK:
        if key in _REGISTRY and not overwrite:
            raise ValueError(f"Cache backend already registered: {name}")
        _REGISTRY[key] = factory


def unregister_backend(name: str) -> None:
    with _LOCK:
        _REGISTRY.pop(_normalize(name), None)


def list_backends() -> list[str]:
    """List registered backend names."""
    with _LOCK:
        return sorted(_REGISTRY.keys())


def create_backend(
    name: str,
    config: CacheConfig | None = None,
    **kwargs: Any,
) -> ICacheBackend:
    """Instantiate the backend registered under ``name``.

    Raises:
        BackendNotFoundError: If nothing is registered under ``name``.
    """
    with _LOCK:
        factory = _REGISTRY.get(_normalize(name))
    if factory is None:
        raise BackendNotFoundError(f"Unknown cache backend '{name}'")
    return factory(config or CacheConfig(), **kwargs)


def select_backend(config: CacheConfig | None = None, **kwargs: Any) -> ICacheBackend:
    """Return the backend to use for this process.

    Uses ``config.method`` when its backend can be created and reports
    itself available, the database backend otherwise.
    """
    config = config or CacheConfig()

    if _normalize(config.method) != _normalize(FALLBACK_METHOD):
        try:
            backend = create_backend(config.method, config, **kwargs)
        except ImportError as e:
            logger.warning("Cache backend %s cannot be loaded: %s", config.method, e)
        else:
            if backend.is_available():
                logger.info("Using %s cache backend", backend.stringify_method())
                return backend
            logger.warning(
                "Cache backend %s is not available, falling back to %s",
                config.method,
                FALLBACK_METHOD,
            )

    backend = create_backend(FALLBACK_METHOD, config, **kwargs)
    logger.info("Using %s cache backend", backend.stringify_method())
    return backend


def _with_signature(kwargs: dict[str, Any]) -> dict[str, Any]:
    """Give the backend a signature generator reading process counters."""
    if kwargs.get("signature") is None:
        kwargs["signature"] = SignatureGenerator(ProcessMetrics())
    return kwargs


def _memory_factory(config: CacheConfig, **kwargs: Any) -> ICacheBackend:
    from cachify.infrastructure.backends.memory import MemoryCacheBackend

    return MemoryCacheBackend(maxsize=config.memory_maxsize, **_with_signature(kwargs))


def _database_factory(config: CacheConfig, **kwargs: Any) -> ICacheBackend:
    from cachify.infrastructure.backends.database import DatabaseCacheBackend

    return DatabaseCacheBackend(config, **_with_signature(kwargs))


def _filesystem_factory(config: CacheConfig, **kwargs: Any) -> ICacheBackend:
    from cachify.infrastructure.backends.filesystem import FilesystemCacheBackend

    return FilesystemCacheBackend(config, **_with_signature(kwargs))


def _redis_factory(config: CacheConfig, **kwargs: Any) -> ICacheBackend:
    from cachify.infrastructure.backends.redis import RedisCacheBackend

    return RedisCacheBackend(config, **_with_signature(kwargs))


def register_builtin_backends() -> None:
    """(Re-)register the bundled backends under their method names."""
    register_backend("Memory", _memory_factory, overwrite=True)
    register_backend("DB", _database_factory, overwrite=True)
    register_backend("HDD", _filesystem_factory, overwrite=True)
    register_backend("Redis", _redis_factory, overwrite=True)


register_builtin_backends()
