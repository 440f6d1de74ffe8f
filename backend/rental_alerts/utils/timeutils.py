"""Naive-UTC time helpers shared by the rules and the sweeper."""
from datetime import datetime, timedelta, timezone

DAY = timedelta(days=1)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the stored columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def whole_days(delta: timedelta) -> int:
    """Floor a timedelta to whole days (negative deltas round down)."""
    return delta // DAY
