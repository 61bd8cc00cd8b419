"""Wall-clock access for the lifecycle engine.

Timestamps are stored as naive UTC datetimes. Every operation accepts an
explicit ``now``; utcnow() is only the default when a caller omits it.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
