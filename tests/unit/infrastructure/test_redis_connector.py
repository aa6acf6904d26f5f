"""Tests for RedisConnector."""

import threading
from unittest.mock import MagicMock

import pytest

redis = pytest.importorskip("redis")

from cachify.hooks import REDIS_SERVERS_FILTER, add_filter  # noqa: E402
from cachify.infrastructure.connectors.redis import RedisConnector  # noqa: E402


class FakeServers:
    """Client factory simulating reachable and unreachable endpoints."""

    def __init__(self, unreachable: set[tuple[str, int]] | None = None) -> None:
        self.unreachable = unreachable or set()
        self.created: list[MagicMock] = []
        self.calls: list[dict] = []

    def __call__(self, **kwargs) -> MagicMock:
        self.calls.append(kwargs)
        client = MagicMock(name=f"redis-{kwargs['host']}:{kwargs['port']}")
        if (kwargs["host"], kwargs["port"]) in self.unreachable:
            client.ping.side_effect = redis.ConnectionError("Connection refused")
        else:
            client.ping.return_value = True
        self.created.append(client)
        return client


A = ("10.0.0.1", 6379)
B = ("10.0.0.2", 6379)


class TestRedisConnector:
    """Tests for RedisConnector."""

    def test_connects_single_endpoint(self) -> None:
        factory = FakeServers()
        connector = RedisConnector([A], client_factory=factory)

        result = connector.connect()

        assert result.ok is True
        assert bool(result) is True
        assert result.connected == ("10.0.0.1:6379",)
        assert connector.primary is factory.created[0]

    def test_passes_timeouts_and_db(self) -> None:
        factory = FakeServers()
        connector = RedisConnector(
            [A], db=3, connect_timeout=0.5, socket_timeout=2.0, client_factory=factory
        )

        connector.connect()

        assert factory.calls == [
            {
                "host": "10.0.0.1",
                "port": 6379,
                "db": 3,
                "socket_connect_timeout": 0.5,
                "socket_timeout": 2.0,
            }
        ]

    def test_all_endpoints_must_connect(self) -> None:
        """Test that one unreachable endpoint fails the whole connector."""
        factory = FakeServers(unreachable={B})
        connector = RedisConnector([A, B], client_factory=factory)

        result = connector.connect()

        assert result.ok is False
        assert "10.0.0.2:6379" in result.reason
        assert connector.clients == []
        assert connector.primary is None
        factory.created[0].close.assert_called_once()

    def test_any_endpoint_is_enough_when_configured(self) -> None:
        factory = FakeServers(unreachable={B})
        connector = RedisConnector([A, B], require_all=False, client_factory=factory)

        result = connector.connect()

        assert result.ok is True
        assert result.connected == ("10.0.0.1:6379",)
        assert connector.require_all is False

    def test_no_endpoint_reachable(self) -> None:
        connector = RedisConnector([A], require_all=False, client_factory=FakeServers({A}))

        assert connector.connect().ok is False

    def test_timeout_is_a_failure(self) -> None:
        factory = FakeServers()

        def slow(**kwargs):
            client = factory(**kwargs)
            client.ping.side_effect = redis.TimeoutError("Timeout reading from socket")
            return client

        connector = RedisConnector([A], client_factory=slow)

        assert connector.connect().ok is False

    def test_os_error_is_a_failure(self) -> None:
        client = MagicMock()
        client.ping.side_effect = OSError("Network is unreachable")
        connector = RedisConnector([A], client_factory=lambda **kwargs: client)

        assert connector.connect().ok is False

    def test_no_servers(self) -> None:
        assert RedisConnector([], client_factory=FakeServers()).connect().ok is False

    def test_result_is_memoized(self) -> None:
        """Test that only the first call tries to connect."""
        factory = FakeServers(unreachable={A})
        connector = RedisConnector([A], client_factory=factory)

        first = connector.connect()
        factory.unreachable.clear()
        second = connector.connect()

        assert first is second
        assert len(factory.created) == 1

    def test_concurrent_first_use_connects_once(self) -> None:
        factory = FakeServers()
        connector = RedisConnector([A], client_factory=factory)
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            connector.connect()

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(factory.created) == 1

    def test_close_allows_reconnect(self) -> None:
        factory = FakeServers()
        connector = RedisConnector([A], client_factory=factory)
        connector.connect()

        connector.close()

        factory.created[0].close.assert_called_once()
        assert connector.clients == []
        assert connector.connect().ok is True
        assert len(factory.created) == 2

    def test_servers_filter_extends_endpoints(self) -> None:
        """Test that deployments can add endpoints through the filter."""
        add_filter(REDIS_SERVERS_FILTER, lambda servers: [*servers, B])
        factory = FakeServers()
        connector = RedisConnector([A], client_factory=factory)

        assert connector.endpoints() == [A, B]
        assert connector.connect().connected == ("10.0.0.1:6379", "10.0.0.2:6379")

    def test_servers_filter_replaces_endpoints(self) -> None:
        add_filter(REDIS_SERVERS_FILTER, lambda servers: [("cache.local", "6380")])

        connector = RedisConnector([A], client_factory=FakeServers())

        assert connector.endpoints() == [("cache.local", 6380)]
