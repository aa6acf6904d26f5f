"""Signature generator for cached output.

The signature is an HTML comment appended to every page served from the
cache. It always carries the marker line and a timestamp. In detailed
mode it also compares the counters recorded when the page was rendered
("Without Cachify") with the counters of the request serving it from the
cache ("With Cachify").
"""

import time
from collections.abc import Callable

from cachify.core.entities.cache_entry import EntryMeta, PageMetrics
from cachify.core.interfaces.metrics import IMetricsProvider
from cachify.utils.formatting import format_timestamp

SIGNATURE_MARKER = "Cachify | http://cachify.de"
GENERATED_LABEL = "Generated"


def format_metrics(prefix: str, queries: int, timer: float, memory: str) -> str:
    return f"{prefix}: {queries} DB queries, {timer} seconds, {memory}"


class SignatureGenerator:
    """Builds the diagnostic trailer for cached pages."""

    def __init__(
        self,
        metrics: IMetricsProvider | None = None,
        clock: Callable[[], float] = time.time,
        marker: str = SIGNATURE_MARKER,
    ) -> None:
        """Initialize the generator.

        Args:
            metrics: Provider of the current request counters. Required
                for detailed signatures; without it detailed mode falls
                back to the brief form.
            clock: Source of the current Unix time.
            marker: First line of the comment.
        """
        self._metrics = metrics
        self._clock = clock
        self._marker = marker

    @property
    def metrics(self) -> IMetricsProvider | None:
        return self._metrics

    def now(self) -> int:
        return int(self._clock())

    def current_metrics(self) -> PageMetrics | None:
        return self._metrics.current() if self._metrics is not None else None

    def capture_meta(self) -> EntryMeta:
        """Capture the counters of the request that rendered a page."""
        metrics = self.current_metrics() or PageMetrics(queries=0, timer=0.0, memory="0 B")
        return EntryMeta.capture(metrics, timestamp=self.now())

    def brief(self, timestamp: int | None = None, label: str = GENERATED_LABEL) -> str:
        """Build the brief signature.

        Args:
            timestamp: Generation time, now by default.
            label: Text in front of the timestamp.
        """
        when = format_timestamp(self.now() if timestamp is None else timestamp)
        return f"\n\n<!-- {self._marker}\n{label} @ {when} -->"

    def detailed(
        self,
        meta: EntryMeta | None,
        method: str,
        current: PageMetrics | None = None,
    ) -> str:
        """Build the detailed signature.

        Falls back to :meth:`brief` when store time metadata or current
        counters are unavailable.

        Args:
            meta: Counters recorded when the page was stored.
            method: Backend name shown in the header line.
            current: Counters of the serving request, read from the
                metrics provider by default.
        """
        if current is None:
            current = self.current_metrics()
        if meta is None or current is None:
            return self.brief(meta.timestamp if meta is not None else None)

        return "\n\n<!-- {}\n{} Cache @ {}\n{}\n{}\n-->".format(
            self._marker,
            method,
            format_timestamp(meta.timestamp),
            format_metrics("Without Cachify", meta.queries, meta.timer, meta.memory),
            format_metrics("With Cachify", current.queries, current.timer, current.memory),
        )

    def for_entry(self, detail: bool, meta: EntryMeta | None, method: str) -> str:
        """Render the signature of a structured entry at print time."""
        if detail:
            return self.detailed(meta, method)
        return self.brief(meta.timestamp if meta is not None else None)
