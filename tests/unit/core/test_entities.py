"""Tests for core entities."""

from pathlib import Path

import pytest

from cachify.core.entities import (
    CacheConfig,
    CacheEntry,
    CacheKey,
    EntryMeta,
    PageMetrics,
    PrintOutcome,
)
from cachify.core.entities.cache_config import parse_servers


class TestCacheEntry:
    """Tests for CacheEntry entity."""

    def test_to_dict_uses_persisted_field_names(self) -> None:
        """Test the persisted shape of a structured entry."""
        entry = CacheEntry(
            data="<html></html>",
            meta=EntryMeta(queries=5, timer=0.02, memory="1MB", timestamp=1700000000),
        )

        assert entry.to_dict() == {
            "data": "<html></html>",
            "meta": {"queries": 5, "timer": 0.02, "memory": "1MB", "time": 1700000000},
        }

    def test_from_dict(self) -> None:
        """Test rebuilding an entry from its persisted form."""
        entry = CacheEntry.from_dict(
            {
                "data": "<p>hi</p>",
                "meta": {"queries": "3", "timer": "0.5", "memory": "2 MB", "time": 10},
            }
        )

        assert entry is not None
        assert entry.data == "<p>hi</p>"
        assert entry.meta == EntryMeta(queries=3, timer=0.5, memory="2 MB", timestamp=10)

    @pytest.mark.parametrize(
        "value",
        [None, "text", [], {}, {"data": ""}, {"data": 42}, {"meta": {}}],
    )
    def test_from_dict_rejects_malformed_values(self, value: object) -> None:
        """Test that malformed values are not entries."""
        assert CacheEntry.from_dict(value) is None

    def test_from_dict_drops_broken_meta(self) -> None:
        """Test that broken metadata keeps the content."""
        entry = CacheEntry.from_dict({"data": "page", "meta": {"queries": 1}})

        assert entry == CacheEntry(data="page", meta=None)

    def test_capture_meta(self) -> None:
        metrics = PageMetrics(queries=7, timer=1.25, memory="3 MB")

        meta = EntryMeta.capture(metrics, timestamp=99)

        assert meta == EntryMeta(queries=7, timer=1.25, memory="3 MB", timestamp=99)


class TestCacheKey:
    """Tests for CacheKey value object."""

    def test_from_request(self) -> None:
        """Test creating a key from request components."""
        key = CacheKey.from_request("example.com", "/about/")

        assert key.host == "example.com"
        assert key.uri == "/about/"
        assert key.hash.endswith(".cachify")
        assert str(key) == key.hash

    def test_scheme_changes_hash(self) -> None:
        http = CacheKey.from_request("example.com", "/")
        https = CacheKey.from_request("example.com", "/", scheme="https")

        assert http.hash != https.hash

    def test_custom_hash_func(self) -> None:
        key = CacheKey.from_request("example.com", "/", hash_func=lambda url: f"h:{url}")

        assert key.hash == "h:http://example.com/"

    def test_cache_key_is_immutable(self) -> None:
        key = CacheKey.from_request("example.com", "/")

        with pytest.raises(AttributeError):
            key.hash = "other"  # type: ignore[misc]


class TestCacheConfig:
    """Tests for CacheConfig entity."""

    def test_defaults(self) -> None:
        config = CacheConfig()

        assert config.enabled is True
        assert config.method == "DB"
        assert config.lifetime == 43200
        assert config.sig_detail is False
        assert config.redis_servers == [("127.0.0.1", 6379)]
        assert config.redis_require_all is True
        assert isinstance(config.cache_dir, Path)

    def test_negative_lifetime_rejected(self) -> None:
        with pytest.raises(ValueError):
            CacheConfig(lifetime=-1)

    def test_cache_dir_is_normalized_to_path(self, tmp_path: Path) -> None:
        config = CacheConfig(cache_dir=str(tmp_path))

        assert config.cache_dir == tmp_path

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test reading settings from the environment."""
        monkeypatch.setenv("CACHIFY_METHOD", "Redis")
        monkeypatch.setenv("CACHIFY_LIFETIME", "600")
        monkeypatch.setenv("CACHIFY_SIG_DETAIL", "yes")
        monkeypatch.setenv("CACHIFY_REDIS_REQUIRE_ALL", "0")
        monkeypatch.setenv("CACHIFY_REDIS_SERVERS", "10.0.0.1:6380, cache.local")

        config = CacheConfig.from_env()

        assert config.method == "Redis"
        assert config.lifetime == 600
        assert config.sig_detail is True
        assert config.redis_require_all is False
        assert config.redis_servers == [("10.0.0.1", 6380), ("cache.local", 6379)]

    def test_parse_servers_skips_blanks(self) -> None:
        assert parse_servers(" ,127.0.0.1:1,") == [("127.0.0.1", 1)]

    def test_hash_suffix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert CacheConfig().hash_suffix == ".cachify"

        monkeypatch.setenv("CACHIFY_HASH_SUFFIX", ".site1")

        assert CacheConfig.from_env().hash_suffix == ".site1"

    def test_empty_hash_suffix_rejected(self) -> None:
        with pytest.raises(ValueError):
            CacheConfig(hash_suffix="")


class TestPrintOutcome:
    def test_served_flag(self) -> None:
        assert PrintOutcome.SERVED.served is True
        assert PrintOutcome.PASSTHROUGH.served is False
