"""Behaviour every bundled backend shares."""

import io
import logging
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from cachify.core.entities import CacheConfig, CacheEntry, PrintOutcome
from cachify.core.interfaces import ICacheBackend
from cachify.infrastructure.backends import (
    DatabaseCacheBackend,
    FilesystemCacheBackend,
    MemoryCacheBackend,
)
from cachify.infrastructure.key_builders.default import DefaultKeyBuilder


def _redis_backend(tmp_path: Path) -> ICacheBackend:
    pytest.importorskip("redis")
    from unittest.mock import MagicMock

    from cachify.infrastructure.backends.redis import RedisCacheBackend
    from cachify.infrastructure.connectors.redis import RedisConnector

    store: dict[str, str] = {}
    client = MagicMock()
    client.ping.return_value = True
    client.set.side_effect = lambda name, value, ex=None: store.__setitem__(name, value)
    client.get.side_effect = lambda name: store.get(name)
    client.delete.side_effect = lambda *names: sum(store.pop(n, None) is not None for n in names)
    client.scan.side_effect = lambda cursor, match=None, count=None: (
        0,
        [name for name in store if name.endswith("/")],
    )
    client.info.side_effect = lambda: {"used_memory": sum(len(v) for v in store.values())}

    return RedisCacheBackend(
        connector=RedisConnector([("127.0.0.1", 6379)], client_factory=lambda **kwargs: client),
        server_software="nginx",
    )


def _database_backend(tmp_path: Path) -> ICacheBackend:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    return DatabaseCacheBackend(engine=engine)


FACTORIES = {
    "memory": lambda tmp_path: MemoryCacheBackend(),
    "database": _database_backend,
    "filesystem": lambda tmp_path: FilesystemCacheBackend(CacheConfig(cache_dir=tmp_path)),
    "redis": _redis_backend,
}


@pytest.fixture(params=sorted(FACTORIES))
def backend(request, tmp_path: Path) -> ICacheBackend:
    return FACTORIES[request.param](tmp_path)


@pytest.fixture
def keys():
    builder = DefaultKeyBuilder()
    return builder.build("example.com", "/first/"), builder.build("example.com", "/second/")


def _data(entry: CacheEntry | str | None) -> str | None:
    if isinstance(entry, CacheEntry):
        return entry.data
    return entry


class TestBackendContract:
    def test_available(self, backend: ICacheBackend) -> None:
        assert backend.is_available() is True
        assert backend.stringify_method()

    def test_round_trip_keeps_payload(self, backend: ICacheBackend, keys) -> None:
        """Test that a stored page comes back unchanged before expiry."""
        page = "<!DOCTYPE html>\n<html lang=\"de\"><body>Größe: 10 €</body></html>"
        first, _ = keys

        backend.store_item(first, page, 3600)

        assert _data(backend.get_item(first)).startswith(page)

    def test_empty_store_is_a_noop(
        self, backend: ICacheBackend, keys, caplog: pytest.LogCaptureFixture
    ) -> None:
        first, second = keys
        backend.store_item(first, "page", 3600)

        with caplog.at_level(logging.WARNING):
            backend.store_item(first, "", 3600)
            backend.store_item(second, "", 3600)

        assert _data(backend.get_item(first)).startswith("page")
        assert backend.get_item(second) is None
        assert caplog.text.count("Empty input") == 2

    def test_absent_after_delete(self, backend: ICacheBackend, keys) -> None:
        """Test that a deleted page is absent and printing it passes through."""
        first, _ = keys
        backend.store_item(first, "page", 3600)

        backend.delete_item(first)
        entry = backend.get_item(first)
        out = io.StringIO()

        assert entry is None
        assert backend.print_cache(True, entry, out) is PrintOutcome.PASSTHROUGH
        assert out.getvalue() == ""

    def test_clear(self, backend: ICacheBackend, keys) -> None:
        first, second = keys
        backend.store_item(first, "one", 3600)
        backend.store_item(second, "two", 3600)

        backend.clear_cache()

        assert backend.get_item(first) is None
        assert backend.get_item(second) is None

    def test_hit_is_served(self, backend: ICacheBackend, keys) -> None:
        first, _ = keys
        backend.store_item(first, "page", 3600)
        out = io.StringIO()

        assert backend.print_cache(False, backend.get_item(first), out) is PrintOutcome.SERVED
        assert out.getvalue().startswith("page")
        assert "<!-- Cachify" in out.getvalue()

    def test_stats(self, backend: ICacheBackend, keys) -> None:
        """Test that stats are unknown while empty and positive afterwards."""
        first, _ = keys
        assert backend.get_stats() is None

        backend.store_item(first, "page", 3600)

        stats = backend.get_stats()
        assert isinstance(stats, int)
        assert stats > 0
