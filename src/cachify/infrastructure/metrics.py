"""Process based metrics provider."""

import sys
import threading
import time
from collections.abc import Callable

from cachify.core.entities.cache_entry import PageMetrics
from cachify.utils.formatting import format_size


def peak_memory_bytes() -> int:
    """Return the peak resident set size of this process in bytes."""
    import resource

    usage = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is bytes on macOS and kilobytes on Linux
    return usage if sys.platform == "darwin" else usage * 1024


class ProcessMetrics:
    """Collects request counters for cache signatures.

    The host application calls ``start()`` when a request begins and
    ``record_query()`` for each database query it runs. Counters are kept
    per thread so concurrent requests in a threaded server don't mix.
    """

    def __init__(self, memory_func: Callable[[], int] = peak_memory_bytes) -> None:
        self._memory_func = memory_func
        self._local = threading.local()

    def start(self) -> None:
        """Reset the counters for a new request."""
        self._local.started = time.perf_counter()
        self._local.queries = 0

    def record_query(self, count: int = 1) -> None:
        self._local.queries = getattr(self._local, "queries", 0) + count

    def current(self) -> PageMetrics:
        """Return the counters as of now."""
        started = getattr(self._local, "started", None)
        elapsed = time.perf_counter() - started if started is not None else 0.0
        return PageMetrics(
            queries=getattr(self._local, "queries", 0),
            timer=round(elapsed, 2),
            memory=format_size(self._memory_func()),
        )
