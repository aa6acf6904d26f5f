"""Formatting helpers for diagnostic output."""

from datetime import datetime

TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M:%S"

_UNITS = (("TB", 1024**4), ("GB", 1024**3), ("MB", 1024**2), ("KB", 1024), ("B", 1))


def format_size(num_bytes: int, decimals: int = 2) -> str:
    """Format a byte count with the largest fitting binary unit.

    Examples:
        >>> format_size(1048576)
        '1.00 MB'
        >>> format_size(512, 0)
        '512 B'
    """
    for unit, magnitude in _UNITS:
        if num_bytes >= magnitude:
            return f"{num_bytes / magnitude:.{decimals}f} {unit}"
    return "0 B"


def format_timestamp(timestamp: int | float) -> str:
    """Format a Unix timestamp in local time as ``dd.mm.YYYY HH:MM:SS``."""
    return datetime.fromtimestamp(timestamp).strftime(TIMESTAMP_FORMAT)
