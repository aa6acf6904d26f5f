"""Redis connection management."""

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import redis

from cachify.hooks import REDIS_SERVERS_FILTER, apply_filters

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., redis.Redis]


@dataclass(frozen=True)
class ConnectResult:
    """Outcome of a connection attempt.

    Attributes:
        ok: Whether the backend may be used.
        reason: Why the attempt failed, None on success.
        connected: Endpoints that answered, as ``host:port``.
    """

    ok: bool
    reason: str | None = None
    connected: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.ok


class RedisConnector:
    """Lazily connects to the configured Redis endpoints.

    The endpoint list is resolved once, through the
    ``cachify_redis_servers`` filter, on first use. Every endpoint gets a
    client and a PING. With ``require_all=True`` the connector only
    succeeds when every endpoint answered; otherwise one is enough.

    The result of the first attempt is kept for the lifetime of the
    connector. ``close()`` drops the clients so the next call connects
    again.
    """

    def __init__(
        self,
        servers: Sequence[tuple[str, int]],
        db: int = 0,
        require_all: bool = True,
        connect_timeout: float | None = 1.0,
        socket_timeout: float | None = 1.0,
        client_factory: ClientFactory = redis.Redis,
    ) -> None:
        """Initialize the connector.

        Args:
            servers: Default ``(host, port)`` endpoints.
            db: Redis database index.
            require_all: AND (True) or OR (False) over endpoint results.
            connect_timeout: Socket connect timeout in seconds.
            socket_timeout: Socket read/write timeout in seconds.
            client_factory: Callable creating a client, ``redis.Redis``
                by default.
        """
        self._servers = list(servers)
        self._db = db
        self._require_all = require_all
        self._connect_timeout = connect_timeout
        self._socket_timeout = socket_timeout
        self._client_factory = client_factory
        self._lock = threading.Lock()
        self._result: ConnectResult | None = None
        self._clients: list[redis.Redis] = []

    @property
    def require_all(self) -> bool:
        return self._require_all

    @property
    def clients(self) -> list[redis.Redis]:
        """Clients of the endpoints that answered."""
        return list(self._clients)

    @property
    def primary(self) -> redis.Redis | None:
        """Client used for reads, the first endpoint that answered."""
        return self._clients[0] if self._clients else None

    def endpoints(self) -> list[tuple[str, int]]:
        """Resolve the endpoint list through the registered filters."""
        servers = apply_filters(REDIS_SERVERS_FILTER, list(self._servers))
        return [(str(host), int(port)) for host, port in servers]

    def connect(self) -> ConnectResult:
        """Connect on first use and return the (cached) outcome.

        Never raises transport errors.
        """
        if self._result is not None:
            return self._result

        with self._lock:
            if self._result is None:
                self._result = self._connect()
        return self._result

    def _connect(self) -> ConnectResult:
        endpoints = self.endpoints()
        if not endpoints:
            logger.warning("No Redis servers configured")
            return ConnectResult(ok=False, reason="no servers configured")

        clients: list[redis.Redis] = []
        connected: list[str] = []
        failures: list[str] = []

        for host, port in endpoints:
            address = f"{host}:{port}"
            client = self._client_factory(
                host=host,
                port=port,
                db=self._db,
                socket_connect_timeout=self._connect_timeout,
                socket_timeout=self._socket_timeout,
            )
            try:
                client.ping()
            except (redis.RedisError, OSError) as e:
                logger.warning("Redis server %s unreachable: %s", address, e)
                failures.append(f"{address}: {e}")
                _close_quietly(client)
                continue
            clients.append(client)
            connected.append(address)

        if self._require_all:
            ok = not failures
        else:
            ok = bool(connected)

        if not ok:
            for client in clients:
                _close_quietly(client)
            reason = "; ".join(failures) or "no server reachable"
            return ConnectResult(ok=False, reason=reason, connected=tuple(connected))

        self._clients = clients
        logger.debug("Connected to Redis servers: %s", ", ".join(connected))
        return ConnectResult(ok=True, connected=tuple(connected))

    def close(self) -> None:
        """Close all clients and forget the connection outcome."""
        with self._lock:
            for client in self._clients:
                _close_quietly(client)
            self._clients = []
            self._result = None


def _close_quietly(client: redis.Redis) -> None:
    try:
        client.close()
    except (redis.RedisError, OSError) as e:
        logger.debug("Error closing Redis client: %s", e)
