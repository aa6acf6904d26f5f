"""Cache entry entities."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class PageMetrics:
    """Performance counters of one request.

    Attributes:
        queries: Number of database queries issued.
        timer: Elapsed request time in seconds.
        memory: Human readable memory usage, e.g. ``"12.50 MB"``.
    """

    queries: int
    timer: float
    memory: str


@dataclass(frozen=True)
class EntryMeta:
    """Metrics captured when an entry was stored."""

    queries: int
    timer: float
    memory: str
    timestamp: int

    @classmethod
    def capture(cls, metrics: PageMetrics, timestamp: int) -> "EntryMeta":
        """Freeze the given request metrics with a store timestamp."""
        return cls(
            queries=metrics.queries,
            timer=metrics.timer,
            memory=metrics.memory,
            timestamp=timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "queries": self.queries,
            "timer": self.timer,
            "memory": self.memory,
            "time": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EntryMeta":
        """Rebuild meta from its persisted form.

        Raises:
            KeyError: If a field is missing.
            TypeError: If ``data`` is not a mapping.
            ValueError: If a field cannot be converted.
        """
        return cls(
            queries=int(data["queries"]),
            timer=float(data["timer"]),
            memory=str(data["memory"]),
            timestamp=int(data["time"]),
        )


@dataclass(frozen=True)
class CacheEntry:
    """Structured cache entry.

    Stored by backends that can keep structured values. The signature
    is not part of ``data``; it is rendered from ``meta`` when the entry
    is printed.
    """

    data: str
    meta: EntryMeta | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"data": self.data}
        if self.meta is not None:
            result["meta"] = self.meta.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Any) -> "CacheEntry | None":
        """Rebuild an entry from its persisted form.

        Returns:
            The entry, or None if ``data`` does not have the expected shape.
        """
        if not isinstance(data, dict):
            return None
        content = data.get("data")
        if not isinstance(content, str) or not content:
            return None

        meta = None
        if isinstance(data.get("meta"), dict):
            try:
                meta = EntryMeta.from_dict(data["meta"])
            except (KeyError, TypeError, ValueError):
                meta = None
        return cls(data=content, meta=meta)


class PrintOutcome(Enum):
    """Result of printing a cached entry.

    SERVED: The response has been written; the caller must stop handling.
    PASSTHROUGH: Nothing was written; render the page normally.
    """

    SERVED = "served"
    PASSTHROUGH = "passthrough"

    @property
    def served(self) -> bool:
        return self is PrintOutcome.SERVED
