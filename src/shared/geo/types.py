"""
Jaipur Traffic Grid - Geographic Types

Immutable value types shared by the grid mapper and distance helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from src.shared.config import GridConfig


class GeoCoordinate(NamedTuple):
    """A (latitude, longitude) pair in decimal degrees."""

    lat: float
    lng: float

    def to_dict(self) -> dict[str, float]:
        """Convert to the `{lat, lng}` shape used by the presentation layer."""
        return {"lat": self.lat, "lng": self.lng}


class GridIndex(NamedTuple):
    """A grid cell address. x grows eastward, y grows southward."""

    x: int
    y: int


@dataclass(frozen=True)
class GeoBoundary:
    """Rectangle defined by its northwest and southeast corners."""

    north_west: GeoCoordinate
    south_east: GeoCoordinate

    def __post_init__(self) -> None:
        if self.north_west.lat <= self.south_east.lat:
            raise ValueError(
                f"Northwest latitude {self.north_west.lat} must be greater than "
                f"southeast latitude {self.south_east.lat}"
            )
        if self.north_west.lng >= self.south_east.lng:
            raise ValueError(
                f"Northwest longitude {self.north_west.lng} must be less than "
                f"southeast longitude {self.south_east.lng}"
            )

    @property
    def lat_span(self) -> float:
        return self.north_west.lat - self.south_east.lat

    @property
    def lng_span(self) -> float:
        return self.south_east.lng - self.north_west.lng

    @property
    def north_east(self) -> GeoCoordinate:
        return GeoCoordinate(self.north_west.lat, self.south_east.lng)

    @property
    def south_west(self) -> GeoCoordinate:
        return GeoCoordinate(self.south_east.lat, self.north_west.lng)

    @property
    def mean_lat(self) -> float:
        return (self.north_west.lat + self.south_east.lat) / 2

    def contains(self, coord: GeoCoordinate) -> bool:
        """Check whether a coordinate lies inside the rectangle (edges included)."""
        return (
            self.south_east.lat <= coord.lat <= self.north_west.lat
            and self.north_west.lng <= coord.lng <= self.south_east.lng
        )

    @classmethod
    def from_config(cls, grid_config: GridConfig) -> GeoBoundary:
        boundary = grid_config.boundary
        return cls(
            north_west=GeoCoordinate(boundary.north_west.lat, boundary.north_west.lng),
            south_east=GeoCoordinate(boundary.south_east.lat, boundary.south_east.lng),
        )


@dataclass(frozen=True)
class GridDimensions:
    """Number of cells along each axis."""

    columns: int
    rows: int

    def __post_init__(self) -> None:
        if self.columns <= 0 or self.rows <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got columns={self.columns}, rows={self.rows}"
            )

    @property
    def cell_count(self) -> int:
        return self.columns * self.rows

    def contains(self, index: GridIndex) -> bool:
        """Check whether an index addresses a cell of this grid."""
        return 0 <= index.x < self.columns and 0 <= index.y < self.rows

    @classmethod
    def from_config(cls, grid_config: GridConfig) -> GridDimensions:
        return cls(
            columns=grid_config.dimensions.columns,
            rows=grid_config.dimensions.rows,
        )


@dataclass(frozen=True)
class GridExtent:
    """Width and height of the mapped area in metres."""

    width_m: float
    height_m: float

    def to_dict(self) -> dict[str, float]:
        return {"width_m": self.width_m, "height_m": self.height_m}
