"""Named filter hooks.

Filters let a deployment adjust values the library computes without
subclassing anything. Each filter is a callable receiving the current
value and returning the new one; filters registered under the same name
run in priority order (lower first), then registration order.

Example:
    from cachify.hooks import add_filter

    def extra_servers(servers):
        return [*servers, ("10.0.0.5", 6380)]

    add_filter(REDIS_SERVERS_FILTER, extra_servers)
"""

import logging
from collections.abc import Callable
from threading import Lock
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

REDIS_SERVERS_FILTER = "cachify_redis_servers"

_FILTERS: dict[str, list[tuple[int, int, Callable[[Any], Any]]]] = {}
_LOCK = Lock()
_counter = 0


def add_filter(name: str, func: Callable[[Any], Any], priority: int = 10) -> None:
    """Register ``func`` under filter ``name``."""
    global _counter
    with _LOCK:
        _counter += 1
        entries = _FILTERS.setdefault(name, [])
        entries.append((priority, _counter, func))
        entries.sort(key=lambda item: (item[0], item[1]))


def remove_filter(name: str, func: Callable[[Any], Any]) -> bool:
    """Unregister ``func`` from filter ``name``.

    Returns:
        True if the callable was registered, False otherwise.
    """
    with _LOCK:
        entries = _FILTERS.get(name, [])
        kept = [entry for entry in entries if entry[2] is not func]
        if len(kept) == len(entries):
            return False
        _FILTERS[name] = kept
        return True


def has_filter(name: str) -> bool:
    with _LOCK:
        return bool(_FILTERS.get(name))


def clear_filters(name: str | None = None) -> None:
    """Remove all filters, or only those registered under ``name``."""
    with _LOCK:
        if name is None:
            _FILTERS.clear()
        else:
            _FILTERS.pop(name, None)


def apply_filters(name: str, value: T) -> T:
    """Pass ``value`` through every filter registered under ``name``."""
    with _LOCK:
        funcs = [entry[2] for entry in _FILTERS.get(name, [])]

    for func in funcs:
        value = func(value)
    logger.debug("Applied %d filter(s) for %s", len(funcs), name)
    return value
