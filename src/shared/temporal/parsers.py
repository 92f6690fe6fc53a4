"""
Jaipur Traffic Grid - Timestamp Parsing

Normalizes the timestamp encodings emitted by the traffic data source into
absolute UTC instants. Every encoding carries wall-clock time of the fixed
civil zone (IST), including some that look like UTC:

    "2026-01-02T09:10:16.000Z"   trailing Z is a labelling artifact;
                                 read as 09:10:16 IST
    "2026-01-02T09:10:16"        no marker, no offset; true UTC
    "2026-01-02 09:10:16"        space separated; read as IST
    "2026-01-02T09:10:16+05:30"  explicit offset; honored as written

The same clock text with and without the trailing Z therefore lands 5.5
hours apart. Keep that branching intact.

Parsing never raises. Missing input yields the current instant; unparseable
input yields the current instant plus a warning log and, when an alert
manager is attached, a non-fatal alert.

Usage:
    from src.shared.temporal import parse_fixed_zone_timestamp

    instant = parse_fixed_zone_timestamp("2025-12-31 21:41:30")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import pandas as pd

from src.shared.config import Settings, get_config
from src.shared.temporal.zone import Clock, fixed_zone, utc_now

if TYPE_CHECKING:
    from src.alerting.alert_manager import AlertManager

logger = logging.getLogger(__name__)


class TimestampShape(StrEnum):
    """How a raw timestamp was interpreted."""

    CIVIL_ZULU = "civil_zulu"
    UTC_NAIVE = "utc_naive"
    CIVIL_SPACE = "civil_space"
    EXPLICIT_OFFSET = "explicit_offset"
    MISSING = "missing"
    INVALID = "invalid"


@dataclass(frozen=True)
class ParsedTimestamp:
    """A normalized instant together with the rule that produced it."""

    instant: datetime
    shape: TimestampShape

    @property
    def is_fallback(self) -> bool:
        """True when the instant is "now" rather than read from the input."""
        return self.shape in (TimestampShape.MISSING, TimestampShape.INVALID)


class TimestampParser:
    """
    Fixed-zone timestamp parser.

    Holds the civil zone, an optional alert manager for diagnostics, and the
    clock used for fallback values.
    """

    ALERT_DATASET = "timestamps"

    def __init__(
        self,
        config: Settings | None = None,
        alert_manager: AlertManager | None = None,
        clock: Clock | None = None,
    ):
        """
        Initialize the parser.

        Args:
            config: Configuration object (uses default if not provided)
            alert_manager: Receives a warning for each unparseable value
            clock: Source of the current instant (defaults to UTC wall clock)
        """
        self.config = config or get_config()
        self.zone = fixed_zone(self.config.temporal)
        self.alert_manager = alert_manager
        self.clock = clock or utc_now

    def parse(self, raw: Any) -> datetime:
        """
        Convert a raw timestamp into an aware UTC datetime.

        Args:
            raw: Timestamp string, or None when the field is missing

        Returns:
            Absolute instant in UTC
        """
        return self.parse_with_shape(raw).instant

    def parse_with_shape(self, raw: Any) -> ParsedTimestamp:
        """Like `parse`, also reporting which rule was applied."""
        if _is_missing(raw) or (isinstance(raw, str) and not raw.strip()):
            return ParsedTimestamp(self.clock(), TimestampShape.MISSING)

        if not isinstance(raw, str):
            return self._fallback(raw, f"expected a string, got {type(raw).__name__}")

        text = raw.strip()
        if "T" in text:
            if text.endswith("Z"):
                candidate, shape = text[:-1], TimestampShape.CIVIL_ZULU
            else:
                candidate, shape = text, TimestampShape.UTC_NAIVE
        else:
            candidate, shape = text.replace(" ", "T", 1), TimestampShape.CIVIL_SPACE

        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError as e:
            return self._fallback(raw, str(e))

        if parsed.tzinfo is not None:
            shape = TimestampShape.EXPLICIT_OFFSET

        try:
            instant = self._to_utc(parsed, shape)
        except OverflowError as e:
            # Dates at the ends of the datetime range cannot be shifted
            return self._fallback(raw, str(e))

        return ParsedTimestamp(instant, shape)

    def parse_values(self, values: Iterable[Any]) -> list[ParsedTimestamp]:
        """Parse a sequence of raw timestamps, keeping the rule applied to each."""
        return [self.parse_with_shape(value) for value in values]

    def parse_series(self, series: pd.Series) -> pd.Series:
        """
        Parse a column of raw timestamps.

        Missing values (None, NaN, NaT) fall back to the current instant like
        any other missing input.

        Returns:
            Series of dtype datetime64[ns, UTC] with the input's index
        """
        instants = [parsed.instant for parsed in self.parse_values(series)]
        return pd.Series(pd.to_datetime(instants, utc=True), index=series.index, name=series.name)

    # =========================================================================
    # Private Methods
    # =========================================================================

    def _to_utc(self, parsed: datetime, shape: TimestampShape) -> datetime:
        """Attach the zone implied by the shape and convert to UTC."""
        if shape == TimestampShape.EXPLICIT_OFFSET:
            return parsed.astimezone(UTC)
        if shape == TimestampShape.UTC_NAIVE:
            return parsed.replace(tzinfo=UTC)
        return parsed.replace(tzinfo=self.zone).astimezone(UTC)

    def _fallback(self, raw: Any, reason: str) -> ParsedTimestamp:
        """Log, alert and substitute the current instant."""
        logger.warning(
            f"Invalid timestamp format: {raw!r}",
            extra={"raw_timestamp": repr(raw), "reason": reason},
        )
        self._notify(raw, reason)
        return ParsedTimestamp(self.clock(), TimestampShape.INVALID)

    def _notify(self, raw: Any, reason: str) -> None:
        """Forward the failure to the alert manager without ever raising."""
        if self.alert_manager is None:
            return
        try:
            self.alert_manager.send_alert(
                title="Invalid timestamp format",
                message=f"Could not parse timestamp {raw!r}: {reason}. Using current time.",
                severity="warning",
                dataset=self.ALERT_DATASET,
                metadata={"raw": repr(raw), "reason": reason},
            )
        except Exception as e:
            logger.error(f"Failed to report invalid timestamp: {e}", exc_info=True)


def _is_missing(value: Any) -> bool:
    """pd.isna for scalars only; containers are never treated as missing."""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


# =============================================================================
# Convenience Functions
# =============================================================================


def parse_fixed_zone_timestamp(raw: str | None, config: Settings | None = None) -> datetime:
    """
    Parse a timestamp string as fixed civil zone time.

    Example:
        parse_fixed_zone_timestamp("2026-01-02T09:10:16.000Z")
        # datetime(2026, 1, 2, 3, 40, 16, tzinfo=UTC), i.e. 09:10:16 IST
    """
    return TimestampParser(config).parse(raw)


def parse_timestamp_series(series: pd.Series, config: Settings | None = None) -> pd.Series:
    """Parse a pandas Series of timestamp strings into UTC datetimes."""
    return TimestampParser(config).parse_series(series)
