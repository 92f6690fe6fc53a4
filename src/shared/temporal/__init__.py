"""
Jaipur Traffic Grid - Temporal Utilities

Temporal processing utilities for traffic readings:
- Timestamp parsing in the fixed civil zone (IST)
- Relative "time ago" phrases
- Display formatting
"""

from src.shared.temporal.formatting import (
    MONTH_ABBREVIATIONS,
    format_chart_time,
    format_compact_time,
    format_detailed_time,
    format_range_time,
    format_standard_time,
    to_civil,
)
from src.shared.temporal.parsers import (
    ParsedTimestamp,
    TimestampParser,
    TimestampShape,
    parse_fixed_zone_timestamp,
    parse_timestamp_series,
)
from src.shared.temporal.relative import JUST_NOW, relative_ago
from src.shared.temporal.zone import as_utc, fixed_zone, utc_now

__all__ = [
    "parse_fixed_zone_timestamp",
    "parse_timestamp_series",
    "TimestampParser",
    "TimestampShape",
    "ParsedTimestamp",
    "relative_ago",
    "JUST_NOW",
    "format_standard_time",
    "format_detailed_time",
    "format_compact_time",
    "format_range_time",
    "format_chart_time",
    "to_civil",
    "MONTH_ABBREVIATIONS",
    "fixed_zone",
    "utc_now",
    "as_utc",
]
