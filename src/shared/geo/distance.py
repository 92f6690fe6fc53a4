"""
Jaipur Traffic Grid - Distance Calculations

Great-circle and equirectangular distances between coordinates, and the
metric extent of a boundary. Used for display and reporting only; cell
placement never goes through these helpers.
"""

from __future__ import annotations

import math

from src.shared.geo.types import GeoBoundary, GeoCoordinate, GridExtent

# Mean Earth radius (IUGG)
EARTH_RADIUS_M = 6_371_008.8

# Length of one degree of latitude, as used by the dashboard grid
METERS_PER_DEGREE_LAT = 111_320.0


def haversine_m(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Great-circle distance between two coordinates in metres."""
    lat1, lng1 = math.radians(a.lat), math.radians(a.lng)
    lat2, lng2 = math.radians(b.lat), math.radians(b.lng)
    dlat = lat2 - lat1
    dlng = lng2 - lng1

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def equirectangular_m(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """
    Equirectangular approximation of the distance in metres.

    Longitude differences are scaled by the cosine of the mean latitude, so
    east-west and north-south degrees are not treated as equal lengths.
    """
    mean_lat = math.radians((a.lat + b.lat) / 2)
    x = math.radians(b.lng - a.lng) * math.cos(mean_lat)
    y = math.radians(b.lat - a.lat)
    return EARTH_RADIUS_M * math.hypot(x, y)


def boundary_extent_m(boundary: GeoBoundary) -> GridExtent:
    """
    Geodesic width and height of a boundary.

    Width is measured along the boundary's mean latitude, height along its
    western edge.
    """
    mean_lat = boundary.mean_lat
    width = haversine_m(
        GeoCoordinate(mean_lat, boundary.north_west.lng),
        GeoCoordinate(mean_lat, boundary.south_east.lng),
    )
    height = haversine_m(boundary.north_west, boundary.south_west)
    return GridExtent(width_m=width, height_m=height)
