"""
Jaipur Traffic Grid - Geographic Utilities

Geographic processing utilities for the dashboard grid:
- Grid cell to coordinate mapping (and the inverse lookup)
- Boundary and grid value types
- Distance calculations
"""

from src.shared.geo.distance import boundary_extent_m, equirectangular_m, haversine_m
from src.shared.geo.grid_mapper import GridCoordinateMapper, cell_center, get_grid_mapper
from src.shared.geo.types import GeoBoundary, GeoCoordinate, GridDimensions, GridExtent, GridIndex

__all__ = [
    "GridCoordinateMapper",
    "cell_center",
    "get_grid_mapper",
    "GeoBoundary",
    "GeoCoordinate",
    "GridDimensions",
    "GridExtent",
    "GridIndex",
    "haversine_m",
    "equirectangular_m",
    "boundary_extent_m",
]
