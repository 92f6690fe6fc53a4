"""
Jaipur Traffic Grid - Fixed Civil Zone

The dashboard reads every "local" timestamp in one fixed UTC offset with no
daylight-saving rules, so a plain `datetime.timezone` is used rather than a
tz database entry.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta, timezone

from src.shared.config import TemporalConfig, get_config

# Returns the current instant; injected where tests need a fixed "now"
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(UTC)


def fixed_zone(temporal_config: TemporalConfig | None = None) -> timezone:
    """
    Build the civil timezone from configuration.

    Args:
        temporal_config: Temporal configuration (uses default if not provided)

    Returns:
        Fixed-offset timezone, e.g. UTC+05:30 named "IST"
    """
    temporal_config = temporal_config or get_config().temporal
    return timezone(
        timedelta(minutes=temporal_config.utc_offset_minutes),
        temporal_config.zone_label,
    )


def as_utc(instant: datetime) -> datetime:
    """Normalize an instant to aware UTC. Naive values are read as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)
