"""Relative time formatting for dashboard columns."""

import time


def format_relative_time(timestamp: float, now: float | None = None) -> str:
    """Format a Unix timestamp as a relative time string.

    Args:
        timestamp: Unix seconds (e.g. BuildState.timestamp)
        now: Optional reference timestamp (defaults to current time)

    Returns:
        "20s ago", "5m ago", "2h 15m ago", "3d ago" or "1y ago".

    Edge cases:
        - Future timestamp → "just now"
        - Timestamp = 0 (epoch) → "unknown"

    """
    if timestamp == 0:
        return "unknown"

    if now is None:
        now = time.time()

    diff = now - timestamp
    if diff < 0:
        return "just now"

    if diff < 60:
        return f"{int(diff)}s ago"

    if diff < 3600:
        return f"{int(diff // 60)}m ago"

    if diff < 86400:
        hours = int(diff // 3600)
        minutes = int((diff % 3600) // 60)
        if minutes > 0:
            return f"{hours}h {minutes}m ago"
        return f"{hours}h ago"

    if diff < 31536000:
        return f"{int(diff // 86400)}d ago"

    return f"{int(diff // 31536000)}y ago"
