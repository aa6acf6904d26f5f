"""Redis cache backend implementation."""

import importlib.util
import logging
import os

import redis

from cachify.core.entities.cache_config import CacheConfig
from cachify.core.entities.cache_key import CacheKey
from cachify.core.services.signature import SignatureGenerator
from cachify.infrastructure.backends.base import FlatCacheBackend
from cachify.infrastructure.connectors.redis import RedisConnector
from cachify.infrastructure.key_builders.default import DefaultKeyBuilder

logger = logging.getLogger(__name__)


class RedisCacheBackend(FlatCacheBackend):
    """Redis cache backend for nginx fronted deployments.

    Pages are stored as plain strings under ``<prefix><host>/<path>/`` so
    nginx can answer straight from Redis without reaching the
    application. The signature is embedded at store time.

    Writes and deletes go to every connected server; reads and stats use
    the first one.
    """

    method = "Redis"

    def __init__(
        self,
        config: CacheConfig | None = None,
        connector: RedisConnector | None = None,
        key_builder: DefaultKeyBuilder | None = None,
        signature: SignatureGenerator | None = None,
        server_software: str | None = None,
    ) -> None:
        """Initialize the Redis cache backend.

        Args:
            config: Cache configuration, defaults otherwise.
            connector: Connector to use instead of one built from config.
            key_builder: Builds the path addresses.
            signature: Signature generator for stored pages.
            server_software: Web server identification, read from the
                ``SERVER_SOFTWARE`` environment variable when omitted.
        """
        super().__init__(signature)
        self._config = config or CacheConfig()
        self._connector = connector or RedisConnector(
            servers=self._config.redis_servers,
            db=self._config.redis_db,
            require_all=self._config.redis_require_all,
            connect_timeout=self._config.redis_connect_timeout,
            socket_timeout=self._config.redis_socket_timeout,
        )
        self._key_builder = key_builder or DefaultKeyBuilder.from_config(self._config)
        self._server_software = server_software
        self._key_prefix = self._config.redis_key_prefix

    @property
    def connector(self) -> RedisConnector:
        return self._connector

    def is_available(self) -> bool:
        """Check for the client library and an nginx front server."""
        if importlib.util.find_spec("redis") is None:
            return False
        software = self._server_software
        if software is None:
            software = os.environ.get("SERVER_SOFTWARE", "")
        return "nginx" in software.lower()

    def store_item(
        self,
        key: CacheKey,
        data: str,
        lifetime: int,
        sig_detail: bool = False,
    ) -> None:
        """Store the signed page under the path address of ``key``."""
        if not self._accepts(data):
            return
        if not self._connect():
            return

        name = self._file_path(key)
        value = self._sign(data, sig_detail)
        expiry = lifetime if lifetime > 0 else None
        for client in self._connector.clients:
            try:
                client.set(name, value, ex=expiry)
            except (redis.RedisError, OSError, UnicodeError) as e:
                logger.warning("Redis store of %s failed: %s", name, e)

    def get_item(self, key: CacheKey) -> str | None:
        if not self._connect():
            return None

        client = self._connector.primary
        if client is None:
            return None
        try:
            value = client.get(self._file_path(key))
        except (redis.RedisError, OSError) as e:
            logger.warning("Redis read failed: %s", e)
            return None

        if isinstance(value, bytes):
            try:
                value = value.decode("utf-8")
            except UnicodeDecodeError:
                return None
        return value if isinstance(value, str) and value else None

    def delete_item(self, key: CacheKey, url: str | None = None) -> None:
        """Delete the page, addressed by ``url`` when given."""
        if not self._connect():
            return

        name = self._file_path(key, url)
        for client in self._connector.clients:
            try:
                client.delete(name)
            except (redis.RedisError, OSError) as e:
                logger.warning("Redis delete of %s failed: %s", name, e)

    def clear_cache(self) -> None:
        """Delete every path address under the key prefix.

        Only keys ending with the path separator are removed, unrelated
        data in the same database is kept.
        """
        if not self._connect():
            return

        pattern = f"{_escape_glob(self._key_prefix)}*/"
        for client in self._connector.clients:
            try:
                self._delete_by_pattern(client, pattern)
            except (redis.RedisError, OSError) as e:
                logger.warning("Redis flush failed: %s", e)

    def get_stats(self) -> int | None:
        """Return the memory reported by the server, in bytes."""
        if not self._connect():
            return None

        client = self._connector.primary
        if client is None:
            return None
        try:
            data = client.info()
        except (redis.RedisError, OSError) as e:
            logger.warning("Redis info failed: %s", e)
            return None

        if not data:
            return None
        used = data.get("used_memory")
        if not used:
            return None
        return int(used)

    def close(self) -> None:
        """Close the Redis connections."""
        self._connector.close()

    def _connect(self) -> bool:
        if not self.is_available():
            return False
        result = self._connector.connect()
        if not result.ok:
            logger.debug("Redis unavailable: %s", result.reason)
        return result.ok

    def _file_path(self, key: CacheKey, path: str | None = None) -> str:
        return self._key_prefix + self._key_builder.path_for(key, path)

    def _delete_by_pattern(self, client: redis.Redis, pattern: str) -> int:
        """Delete keys matching a pattern using SCAN.

        Uses SCAN instead of KEYS for production safety.
        """
        count = 0
        cursor = 0

        while True:
            cursor, keys = client.scan(cursor, match=pattern, count=100)

            if keys:
                count += client.delete(*keys)

            if cursor == 0:
                break

        return count


def _escape_glob(value: str) -> str:
    for char in "\\*?[]":
        value = value.replace(char, "\\" + char)
    return value
