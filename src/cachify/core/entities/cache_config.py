"""Cache configuration entity."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from cachify.utils.hashing import HASH_SUFFIX

DEFAULT_REDIS_SERVERS: tuple[tuple[str, int], ...] = (("127.0.0.1", 6379),)


@dataclass
class CacheConfig:
    """Cache configuration.

    Provides the settings shared by every cache backend: the entry
    lifetime, the signature detail toggle, the preferred caching method
    and the per-backend connection options.

    Redis endpoints:
        ``redis_servers`` is the default endpoint list. Deployments can
        extend or replace it at runtime through the
        ``cachify_redis_servers`` filter (see :mod:`cachify.hooks`).
        With ``redis_require_all=True`` (the default) every endpoint has
        to connect for the backend to be usable.

    Hash suffix:
        Hash addresses end with ``hash_suffix``. The database backend
        flushes and measures rows by it, so a key builder must use the
        same suffix (see ``DefaultKeyBuilder.from_config``).
    """

    enabled: bool = True
    method: str = "DB"
    lifetime: int = 12 * 60 * 60  # seconds
    sig_detail: bool = False
    hash_suffix: str = HASH_SUFFIX

    # Memory backend
    memory_maxsize: int = 1000

    # Database backend
    database_url: str = "sqlite://"
    database_table: str = "options"

    # Filesystem backend
    cache_dir: Path | str | None = None
    gzip: bool = True

    # Redis backend
    redis_servers: list[tuple[str, int]] = field(
        default_factory=lambda: list(DEFAULT_REDIS_SERVERS)
    )
    redis_db: int = 0
    redis_key_prefix: str = ""
    redis_require_all: bool = True
    redis_connect_timeout: float = 1.0
    redis_socket_timeout: float = 1.0

    def __post_init__(self) -> None:
        """Normalize derived values."""
        self.method = self.method.strip()
        if self.lifetime < 0:
            raise ValueError(f"lifetime must be >= 0, got {self.lifetime}")
        if not self.hash_suffix:
            raise ValueError("hash_suffix must be non-empty")
        if self.cache_dir is None:
            self.cache_dir = Path.cwd() / "cache" / "cachify"
        self.cache_dir = Path(self.cache_dir)
        self.redis_servers = [(str(host), int(port)) for host, port in self.redis_servers]

    @classmethod
    def from_env(cls, prefix: str = "CACHIFY_") -> "CacheConfig":
        """Build a configuration from ``CACHIFY_*`` environment variables.

        Unset variables keep their dataclass defaults. ``REDIS_SERVERS`` is
        a comma separated list of ``host:port`` pairs.
        """
        env = {
            key[len(prefix):].lower(): value
            for key, value in os.environ.items()
            if key.startswith(prefix)
        }
        kwargs: dict[str, object] = {}

        for name in (
            "method",
            "hash_suffix",
            "database_url",
            "database_table",
            "cache_dir",
            "redis_key_prefix",
        ):
            if name in env:
                kwargs[name] = env[name]
        for name in ("lifetime", "memory_maxsize", "redis_db"):
            if name in env:
                kwargs[name] = int(env[name])
        for name in ("redis_connect_timeout", "redis_socket_timeout"):
            if name in env:
                kwargs[name] = float(env[name])
        for name in ("enabled", "sig_detail", "gzip", "redis_require_all"):
            if name in env:
                kwargs[name] = _parse_bool(env[name])
        if "redis_servers" in env:
            kwargs["redis_servers"] = parse_servers(env["redis_servers"])

        return cls(**kwargs)  # type: ignore[arg-type]


def parse_servers(value: str) -> list[tuple[str, int]]:
    """Parse ``"host:port,host:port"`` into endpoint tuples.

    A missing port falls back to 6379.
    """
    servers = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        host, _, port = item.rpartition(":")
        if not host:
            host, port = port, "6379"
        servers.append((host, int(port)))
    return servers


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
