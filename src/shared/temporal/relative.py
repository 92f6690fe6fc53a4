"""
Jaipur Traffic Grid - Relative Time Phrases

Renders the age of a reading as a short English phrase:

    0 minutes           "Just now"
    1-59 minutes        "1 minute ago", "15 minutes ago"
    1-23 hours          "3 hours ago" on whole hours, else "1h 15m ago"
    24 hours and more   "1 day ago", "2 days ago" (hours are dropped)
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from src.shared.temporal.zone import as_utc, utc_now

logger = logging.getLogger(__name__)

JUST_NOW = "Just now"

_MINUTE = timedelta(minutes=1)
_HOUR = timedelta(hours=1)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def relative_ago(past: datetime, now: datetime | None = None) -> str:
    """
    Describe how long ago `past` was.

    Args:
        past: Instant being described. Naive values are read as UTC.
        now: Reference instant (defaults to the current time)

    Returns:
        Phrase such as "Just now", "5 minutes ago" or "2h 30m ago"
    """
    now = as_utc(now) if now is not None else utc_now()
    elapsed = now - as_utc(past)

    if elapsed < timedelta(0):
        # Readings stamped ahead of the local clock
        logger.debug(f"Instant {past.isoformat()} is in the future, reporting as just now")
        return JUST_NOW

    minutes = elapsed // _MINUTE
    hours = elapsed // _HOUR

    if minutes == 0:
        return JUST_NOW
    if minutes < 60:
        return f"{_plural(minutes, 'minute')} ago"
    if hours < 24:
        remaining_minutes = minutes % 60
        if remaining_minutes == 0:
            return f"{_plural(hours, 'hour')} ago"
        return f"{hours}h {remaining_minutes}m ago"

    days = hours // 24
    return f"{_plural(days, 'day')} ago"
