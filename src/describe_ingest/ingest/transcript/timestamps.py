"""Human-readable timestamps for transcript chunks."""

from __future__ import annotations


def format_timestamp(ms: int) -> str:
    """Format a millisecond offset as H:MM:SS, or M:SS under an hour.

    Examples:
        >>> format_timestamp(65_000)
        '1:05'
        >>> format_timestamp(3_723_000)
        '1:02:03'
    """
    seconds = max(0, int(ms)) // 1000
    minutes = seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}:{minutes % 60:02d}:{seconds % 60:02d}"
    return f"{minutes}:{seconds % 60:02d}"
