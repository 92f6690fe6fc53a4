"""
Jaipur Traffic Grid - Traffic Reading Preprocessor

Prepares raw grid readings from the traffic data source for display.

Transformations:
    - Column renaming to standardized names
    - Grid index validation (cells outside the grid are dropped)
    - Severity bucket counts coerced to integers
    - Cell placement (cell-center latitude/longitude)
    - Timestamp normalization in the fixed civil zone
    - Relative age phrase
    - Chronological ordering

Usage:
    from src.datasets.traffic.preprocess import TrafficGridPreprocessor

    preprocessor = TrafficGridPreprocessor()
    result = preprocessor.run(raw_df, execution_date="2026-01-02")
    readings = preprocessor.get_data()
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import pandas as pd

from src.alerting.alert_manager import AlertManager
from src.datasets.base import BasePreprocessor
from src.shared.config import Settings
from src.shared.geo.grid_mapper import GridCoordinateMapper
from src.shared.temporal.parsers import TimestampParser, TimestampShape
from src.shared.temporal.relative import relative_ago
from src.shared.temporal.zone import Clock, utc_now

logger = logging.getLogger(__name__)


class TrafficGridPreprocessor(BasePreprocessor):
    """
    Preprocessor for traffic grid readings.

    Each reading addresses one grid cell and carries congestion counts per
    severity bucket plus the time of the reading.
    """

    # Column mapping from raw API names to standardized names
    COLUMN_MAPPINGS = {
        "darkRed": "dark_red",
        "dark-red": "dark_red",
        "timestamp": "ts",
    }

    DTYPE_MAPPINGS = {
        "x": "int",
        "y": "int",
        "yellow": "int",
        "red": "int",
        "dark_red": "int",
        "latest_severity": "float",
    }

    SEVERITY_COLUMNS = ["yellow", "red", "dark_red"]

    REQUIRED_COLUMNS = [
        "x",
        "y",
        "lat",
        "lng",
        "yellow",
        "red",
        "dark_red",
        "observed_at",
        "age",
    ]

    def __init__(
        self,
        config: Settings | None = None,
        mapper: GridCoordinateMapper | None = None,
        alert_manager: AlertManager | None = None,
        clock: Clock | None = None,
    ):
        """
        Initialize traffic preprocessor.

        Args:
            config: Configuration object (uses default if not provided)
            mapper: Grid mapper (built from config if not provided)
            alert_manager: Receives a summary when timestamps fall back to now
            clock: Source of the current instant
        """
        super().__init__(config)
        self.mapper = mapper or GridCoordinateMapper(self.config.grid)
        self.alert_manager = alert_manager
        self.clock = clock or utc_now
        self.parser = TimestampParser(self.config, clock=self.clock)

    def get_dataset_name(self) -> str:
        """Return dataset name."""
        return "traffic_grid"

    def get_required_columns(self) -> list[str]:
        """Return required output columns."""
        return self.REQUIRED_COLUMNS

    def get_column_mappings(self) -> dict[str, str]:
        """Return column name mappings."""
        return self.COLUMN_MAPPINGS

    def get_dtype_mappings(self) -> dict[str, str]:
        """Return data type mappings."""
        return self.DTYPE_MAPPINGS

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Apply traffic-specific transformations.

        Args:
            df: Raw DataFrame with renamed columns

        Returns:
            Placed, time-normalized readings sorted oldest first
        """
        now = self.clock()

        df = self._process_indices(df)
        df = self._process_counts(df)
        df = self._place_cells(df)
        df = self._process_timestamps(df)
        df = self._add_age(df, now)

        df = df.sort_values("observed_at", kind="stable").reset_index(drop=True)
        self.log_transformation("sort_by_observed_at")

        return df

    def _process_indices(self, df: pd.DataFrame) -> pd.DataFrame:
        """Drop readings without a usable grid cell."""
        missing = {"x", "y"} - set(df.columns)
        if missing:
            raise ValueError(f"Missing grid index columns: {missing}")

        invalid_mask = df["x"].isna() | df["y"].isna()
        invalid_count = int(invalid_mask.sum())
        if invalid_count > 0:
            self.log_dropped_rows("invalid_index", invalid_count)
            df = df[~invalid_mask].copy()

        dims = self.mapper.dimensions
        x = df["x"].astype(int)
        y = df["y"].astype(int)
        out_of_grid = (x < 0) | (x >= dims.columns) | (y < 0) | (y >= dims.rows)
        out_of_grid_count = int(out_of_grid.sum())
        if out_of_grid_count > 0:
            logger.warning(
                f"Dropping {out_of_grid_count} readings outside the "
                f"{dims.columns}x{dims.rows} grid",
                extra={"dataset": self.get_dataset_name(), "count": out_of_grid_count},
            )
            self.log_dropped_rows("out_of_grid", out_of_grid_count)

        df = df[~out_of_grid].copy()
        df["x"] = x[~out_of_grid]
        df["y"] = y[~out_of_grid]
        self.log_transformation("validate_grid_indices")

        return df

    def _process_counts(self, df: pd.DataFrame) -> pd.DataFrame:
        """Severity bucket counts default to zero."""
        for col in self.SEVERITY_COLUMNS:
            if col not in df.columns:
                df[col] = 0
            df = self.fill_missing(df, col, 0)
            df[col] = df[col].astype(int)
        return df

    def _place_cells(self, df: pd.DataFrame) -> pd.DataFrame:
        """Add cell-center coordinates."""
        lats, lngs = self.mapper.cell_centers(df["x"].to_numpy(), df["y"].to_numpy())
        df["lat"] = lats
        df["lng"] = lngs
        self.log_transformation("place_cells")
        return df

    def _process_timestamps(self, df: pd.DataFrame) -> pd.DataFrame:
        """Normalize reading times to UTC instants."""
        raw_values = df["ts"] if "ts" in df.columns else pd.Series(None, index=df.index)

        parsed = self.parser.parse_values(raw_values)
        df["observed_at"] = pd.to_datetime([p.instant for p in parsed], utc=True)

        fallback_samples = [
            str(raw) for raw, p in zip(raw_values, parsed) if p.shape == TimestampShape.INVALID
        ]
        missing_count = sum(1 for p in parsed if p.shape == TimestampShape.MISSING)

        if missing_count > 0:
            self.log_transformation(f"missing_timestamps_set_to_now: {missing_count}")
        if fallback_samples:
            self.log_transformation(f"invalid_timestamps_set_to_now: {len(fallback_samples)}")
            if self.alert_manager is not None:
                self.alert_manager.send_timestamp_fallback_alert(
                    dataset=self.get_dataset_name(),
                    fallback_count=len(fallback_samples),
                    total_count=len(parsed),
                    samples=fallback_samples,
                )

        self.log_transformation("normalize_timestamps")
        return df

    def _add_age(self, df: pd.DataFrame, now: datetime) -> pd.DataFrame:
        """Add the relative age of each reading."""
        df["age"] = [relative_ago(ts.to_pydatetime(), now) for ts in df["observed_at"]]
        self.log_transformation("add_age")
        return df


# =============================================================================
# Convenience Functions
# =============================================================================


def preprocess_traffic_data(
    df: pd.DataFrame,
    execution_date: str,
    config: Settings | None = None,
) -> dict[str, Any]:
    """
    Convenience function for preprocessing traffic readings.

    Returns the result dictionary for logging.
    """
    preprocessor = TrafficGridPreprocessor(config)
    result = preprocessor.run(df, execution_date)
    return result.to_dict()
