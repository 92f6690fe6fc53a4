"""
Jaipur Traffic Grid - Grid Coordinate Mapper

Maps discrete grid cells to geographic coordinates inside a fixed boundary.

Two sizing modes are supported, selected by the grid configuration:
- Linear: every cell spans an equal number of degrees on each axis.
- Metric: cells span a fixed number of metres. The latitude step is
  constant; the longitude step is corrected by the cosine of the row's
  center latitude, so cells further from the equator span more degrees.

Both are pure functions of the index. Indices outside the grid are
extrapolated rather than rejected; use `GridDimensions.contains` to validate.

Usage:
    from src.shared.geo import GridCoordinateMapper

    mapper = GridCoordinateMapper()
    center = mapper.cell_center(7, 10)  # GeoCoordinate(lat=..., lng=...)
    index = mapper.locate(center.lat, center.lng)  # GridIndex(x=7, y=10)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator

import numpy as np

from src.shared.config import GridConfig, Settings, get_config
from src.shared.geo.distance import METERS_PER_DEGREE_LAT, boundary_extent_m
from src.shared.geo.types import GeoBoundary, GeoCoordinate, GridDimensions, GridExtent, GridIndex

logger = logging.getLogger(__name__)


class GridCoordinateMapper:
    """
    Converts grid indices to cell-center coordinates and back.

    The configuration is read once at construction; the mapper holds no
    mutable state afterwards.
    """

    def __init__(self, grid_config: GridConfig | None = None):
        """
        Initialize the mapper.

        Args:
            grid_config: Grid configuration (uses default if not provided)
        """
        grid_config = grid_config or get_config().grid

        self.boundary = GeoBoundary.from_config(grid_config)
        self.dimensions = GridDimensions.from_config(grid_config)
        self.extent: GridExtent | None = None
        if grid_config.extent is not None:
            self.extent = GridExtent(
                width_m=grid_config.extent.width_m,
                height_m=grid_config.extent.height_m,
            )

        if self.extent is None:
            self.lat_step = self.boundary.lat_span / self.dimensions.rows
            self._cell_width_m = None
        else:
            self.lat_step = (self.extent.height_m / self.dimensions.rows) / METERS_PER_DEGREE_LAT
            self._cell_width_m = self.extent.width_m / self.dimensions.columns
        self._linear_lng_step = self.boundary.lng_span / self.dimensions.columns

        logger.debug(
            f"Grid mapper ready: {self.dimensions.columns}x{self.dimensions.rows} "
            f"({'metric' if self.is_metric else 'linear'} sizing)",
            extra={
                "columns": self.dimensions.columns,
                "rows": self.dimensions.rows,
                "lat_step": self.lat_step,
            },
        )

    @property
    def is_metric(self) -> bool:
        """True when cells are sized in metres rather than degrees."""
        return self._cell_width_m is not None

    def row_center_lat(self, y: float) -> float:
        """Latitude of the center line of row `y`."""
        return self.boundary.north_west.lat - self.lat_step * (y + 0.5)

    def lng_step_at(self, lat: float) -> float:
        """Width of one cell in degrees of longitude at latitude `lat`."""
        if self._cell_width_m is None:
            return self._linear_lng_step
        return self._cell_width_m / (METERS_PER_DEGREE_LAT * math.cos(math.radians(lat)))

    # =========================================================================
    # Public API
    # =========================================================================

    def cell_center(self, x: int, y: int) -> GeoCoordinate:
        """
        Get the geographic center of a grid cell.

        Args:
            x: Column index, counted eastward from the west edge
            y: Row index, counted southward from the north edge

        Returns:
            Coordinate of the cell center
        """
        lat = self.row_center_lat(y)
        lng = self.boundary.north_west.lng + self.lng_step_at(lat) * (x + 0.5)
        return GeoCoordinate(lat, lng)

    def cell_bounds(self, x: int, y: int) -> GeoBoundary:
        """Get the corners of a grid cell."""
        top = self.boundary.north_west.lat - self.lat_step * y
        bottom = top - self.lat_step
        lng_step = self.lng_step_at(self.row_center_lat(y))
        west = self.boundary.north_west.lng + lng_step * x
        east = west + lng_step
        return GeoBoundary(
            north_west=GeoCoordinate(top, west),
            south_east=GeoCoordinate(bottom, east),
        )

    def locate(self, lat: float, lng: float) -> GridIndex:
        """
        Find the cell containing a coordinate.

        Inverse of `cell_center`. Coordinates outside the boundary yield
        indices outside the grid.
        """
        y = math.floor((self.boundary.north_west.lat - lat) / self.lat_step)
        lng_step = self.lng_step_at(self.row_center_lat(y))
        x = math.floor((lng - self.boundary.north_west.lng) / lng_step)
        return GridIndex(x, y)

    def iter_cells(self) -> Iterator[tuple[GridIndex, GeoCoordinate]]:
        """Yield every cell with its center, row by row from the northwest."""
        for y in range(self.dimensions.rows):
            for x in range(self.dimensions.columns):
                yield GridIndex(x, y), self.cell_center(x, y)

    def cell_centers(self, xs, ys) -> tuple[np.ndarray, np.ndarray]:
        """
        Vectorized `cell_center`.

        Args:
            xs: Column indices (array-like)
            ys: Row indices (array-like, same shape as xs)

        Returns:
            Tuple of (latitudes, longitudes) arrays
        """
        xs = np.asarray(xs, dtype=float)
        ys = np.asarray(ys, dtype=float)

        lats = self.boundary.north_west.lat - self.lat_step * (ys + 0.5)
        if self._cell_width_m is None:
            lng_steps = np.full_like(lats, self._linear_lng_step)
        else:
            lng_steps = self._cell_width_m / (METERS_PER_DEGREE_LAT * np.cos(np.radians(lats)))
        lngs = self.boundary.north_west.lng + lng_steps * (xs + 0.5)

        return lats, lngs

    def extent_m(self) -> GridExtent:
        """Size of the mapped area: the surveyed extent if configured, else geodesic."""
        if self.extent is not None:
            return self.extent
        return boundary_extent_m(self.boundary)


# =============================================================================
# Convenience Functions
# =============================================================================


def get_grid_mapper(config: Settings | None = None) -> GridCoordinateMapper:
    """Create a mapper for the given (or default) configuration."""
    config = config or get_config()
    return GridCoordinateMapper(config.grid)


def cell_center(x: int, y: int, config: Settings | None = None) -> GeoCoordinate:
    """
    Get the center of cell (x, y) on the configured grid.

    Example:
        cell_center(0, 0)  # GeoCoordinate(lat=26.985059..., lng=75.659072...)
    """
    return get_grid_mapper(config).cell_center(x, y)
