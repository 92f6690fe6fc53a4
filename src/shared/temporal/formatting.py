"""
Jaipur Traffic Grid - Display Time Formats

Every display format renders the instant in the fixed civil zone:

    format_standard_time   "31-Dec-2025 21:41:30 IST" (options below)
    format_detailed_time   "31-Dec-2025 21:41:30 IST"
    format_compact_time    "01-Jan-2025 09:05"
    format_range_time      "1-Jan-2025 09:05"
    format_chart_time      "31/12 23:23"

Month names are fixed English abbreviations, independent of the process
locale.
"""

from __future__ import annotations

from datetime import datetime

from src.shared.config import Settings, get_config
from src.shared.temporal.zone import as_utc, fixed_zone

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)  # fmt: skip


def to_civil(instant: datetime, config: Settings | None = None) -> datetime:
    """Convert an instant to wall-clock time in the civil zone."""
    config = config or get_config()
    return as_utc(instant).astimezone(fixed_zone(config.temporal))


def format_standard_time(
    instant: datetime,
    include_seconds: bool = True,
    include_timezone: bool = True,
    use_12_hour: bool = False,
    compact: bool = False,
    config: Settings | None = None,
) -> str:
    """
    Format an instant as "D-Mon-YYYY HH:MM[:SS][ am|pm][ IST]".

    Args:
        instant: Instant to format
        include_seconds: Append seconds to the time
        include_timezone: Append the civil zone label
        use_12_hour: 12-hour clock with an am/pm suffix
        compact: Zero-pad the day of month
        config: Configuration object (uses default if not provided)
    """
    config = config or get_config()
    local = to_civil(instant, config)

    day = f"{local.day:02d}" if compact else str(local.day)
    date_part = f"{day}-{MONTH_ABBREVIATIONS[local.month - 1]}-{local.year}"

    hour = local.hour
    if use_12_hour:
        hour = local.hour % 12 or 12
    time_part = f"{hour:02d}:{local.minute:02d}"
    if include_seconds:
        time_part += f":{local.second:02d}"
    if use_12_hour:
        time_part += " am" if local.hour < 12 else " pm"

    formatted = f"{date_part} {time_part}"
    if include_timezone:
        formatted += f" {config.temporal.zone_label}"
    return formatted


def format_compact_time(instant: datetime, config: Settings | None = None) -> str:
    """Format for space-constrained UI elements."""
    return format_standard_time(
        instant,
        include_seconds=False,
        include_timezone=False,
        compact=True,
        config=config,
    )


def format_detailed_time(instant: datetime, config: Settings | None = None) -> str:
    """Full format for tooltips and detail views."""
    return format_standard_time(instant, include_seconds=True, include_timezone=True, config=config)


def format_range_time(instant: datetime, config: Settings | None = None) -> str:
    """Format for data ranges and summaries."""
    return format_standard_time(
        instant, include_seconds=False, include_timezone=False, config=config
    )


def format_chart_time(instant: datetime, config: Settings | None = None) -> str:
    """Chart axis label, "DD/MM HH:MM"."""
    local = to_civil(instant, config)
    return f"{local.day:02d}/{local.month:02d} {local.hour:02d}:{local.minute:02d}"
