"""Connection management for networked backends."""

from cachify.infrastructure.connectors.redis import ConnectResult, RedisConnector

__all__ = ["ConnectResult", "RedisConnector"]
